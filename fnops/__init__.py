"""Resource operators, an apply manager, an in-memory client and container helpers for serverless functions."""

__version__ = "0.1.0"