"""rolefit: least-privilege role resolution for cloud access control."""

__version__ = "0.1.0"
