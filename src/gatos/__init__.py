"""A small HTTP service over a CSV table of cats."""

__version__ = "0.1.0"
