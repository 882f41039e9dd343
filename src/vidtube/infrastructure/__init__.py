"""Infrastructure adapters: auth primitives, persistence, storage and HTTP API."""
