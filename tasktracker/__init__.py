"""Task Tracker — REST backend for a small task list."""

__version__ = "1.0.0"
