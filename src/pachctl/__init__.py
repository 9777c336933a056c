"""Administrative command front-end for a Pachyderm cluster."""

__version__ = "1.5.0"
