"""Database Base — SQLAlchemy declarative Base shared by ORM models and alembic.

Design Decisions:
    - asyncpg driver for PostgreSQL in production, aiosqlite in tests
"""
