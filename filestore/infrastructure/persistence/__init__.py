"""Persistence: async SQLAlchemy engine, models and repositories."""
