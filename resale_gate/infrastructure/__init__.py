"""Infrastructure adapters: persistence, stubs, monitoring and observability."""
