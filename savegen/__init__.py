"""Models, data access, use cases and Flask handlers for recording users' savings transactions."""

__version__ = "0.1.0"