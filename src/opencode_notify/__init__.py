"""Status tracking and notifications for opencode instances."""

__version__ = "0.1.0"
