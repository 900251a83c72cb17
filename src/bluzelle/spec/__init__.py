"""Data model and response schemas."""
