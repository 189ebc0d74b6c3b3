"""Client for listing and creating opportunities against the opportunity API."""

__version__ = "0.1.0"
