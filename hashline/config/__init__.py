"""Configuration models and loader."""
