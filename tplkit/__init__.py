"""Template filters, testers and global functions operating on JSON-like values."""

__version__ = "0.1.0"