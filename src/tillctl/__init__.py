"""tillctl: single-till point-of-sale engine for a pop-up shop."""

__version__ = "0.1.0"
