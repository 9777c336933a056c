"""Adapters binding pachctl ports to gRPC, subprocesses and terminals."""
