"""Services Layer — orchestrates core rules around storage calls.

Invariants:
    - Validation happens before any storage write
    - Storage failures are classified here (NotFound passthrough, StorageError wrap)
"""
