"""packmate - cross-platform app installer script generation and package verification."""

__version__ = "0.1.0"
