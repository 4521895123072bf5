"""Link preview metadata service."""

__version__ = "0.1.0"
