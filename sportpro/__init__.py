"""SportPro - sports predictions API with single-use premium activation."""

__version__ = "0.1.0"
