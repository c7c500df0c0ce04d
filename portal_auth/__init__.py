"""Email Service Portal: login / register flow and bearer token storage."""

__version__ = "1.0.0"
