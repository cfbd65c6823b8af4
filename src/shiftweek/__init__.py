"""Weekly shift-schedule validation and analysis."""

__version__ = "0.1.0"
