"""server-finder — find infrastructure records by IP, hostname or URL."""

__version__ = "0.1.0"
