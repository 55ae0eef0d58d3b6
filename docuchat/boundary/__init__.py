"""Boundary adapters: database, AWS storage and search, hosted LLM."""
