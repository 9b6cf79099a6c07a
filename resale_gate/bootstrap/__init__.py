"""Bootstrap wiring: configuration, persistence and service singletons."""
