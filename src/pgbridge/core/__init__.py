"""Core building blocks: value serialization, schema mapping, result tables."""
