"""Application services behind pachctl's local commands."""
