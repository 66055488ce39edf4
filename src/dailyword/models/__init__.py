"""Database and domain models."""
