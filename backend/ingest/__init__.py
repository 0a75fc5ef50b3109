"""Match-state ingestion: fixture sources, in-memory match state and capability cache."""
