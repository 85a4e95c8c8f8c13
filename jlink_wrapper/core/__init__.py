"""Core: configuration, models, services and use cases."""
