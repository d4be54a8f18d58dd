"""rosterpipe - generic select, transform and consume pipelines over in-memory collections."""

__version__ = "0.1.0"
