"""Next-edit suggestion management for interactively edited documents."""

__version__ = "0.1.0"
