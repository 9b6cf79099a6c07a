"""Production adapters for the application ports."""
