"""Infrastructure layer — SQLite persistence and the registry repository.

This layer depends on stdlib, the domain layer and SQLAlchemy/Alembic.
It must never import from services, commands, or output.
"""
