"""Infrastructure layer — database engine, schema, and the section store.

This layer depends on stdlib and SQLAlchemy, plus domain models for row mapping.
It must never import from services, commands, or output.
"""
