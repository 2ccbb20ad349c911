"""macOS Cache Manager - scan and clean cache folders."""

__version__ = "0.1.0"
