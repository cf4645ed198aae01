"""Infrastructure Layer — database access, storage adapter and logging.

Invariants:
    - Implements core ports; core never imports from here
    - SQLAlchemy errors never escape as-is to the API (service wraps them)
"""
