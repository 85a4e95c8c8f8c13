"""jlink-wrapper: build modular Java runtime images with jlink."""

__version__ = "0.1.0"
