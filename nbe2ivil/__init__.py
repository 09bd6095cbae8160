"""Convert NBE scanner output into IVIL XML."""

__version__ = "0.1.0"
