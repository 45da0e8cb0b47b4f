"""
Feature modules for runlog.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models
- schemas.py - Pydantic schemas (optional)
- repository.py - Data access
"""
