"""Core domain: models, configuration, engine and use cases."""
