"""Task persistence and view-state core of the todo app."""

__version__ = "0.1.0"
