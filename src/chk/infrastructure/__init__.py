"""Infrastructure shared by adapters (database engine, metadata)."""
