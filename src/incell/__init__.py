"""In-cell test parameter setting over a serial link."""

__version__ = "0.1.0"
