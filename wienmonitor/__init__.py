"""Wien departure monitor dashboard."""

__version__ = "0.1.0"
