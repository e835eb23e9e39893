"""Core Django app: dashboard views, upstream API access and charting."""
