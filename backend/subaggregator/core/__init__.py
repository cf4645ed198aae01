"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Parsing, validation, filter building and pagination are pure and deterministic
    - The storage port (repository_protocols.py) is the only async surface

Design Decisions:
    - Functional core separated from imperative shell
"""
