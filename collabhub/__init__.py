"""collabhub - realtime collaboration hub for hosted apps."""

__version__ = "1.0.0"
