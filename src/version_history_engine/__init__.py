"""Version history engine for collaborative documents."""

__version__ = "0.1.0"
