"""Store-independent ingestion and aggregation rules."""
