"""Core pipeline logic: retrieval, indexing, summarization and responses."""
