"""Aggregation, classification, and view selection for news stories."""
