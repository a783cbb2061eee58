"""Infrastructure layer: adapters for the durable store, cache and external services."""
