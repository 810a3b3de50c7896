"""Persistence: SQLAlchemy engine, models, repositories and unit of work."""
