"""Packaged resources for pachctl."""
