"""Subscription Aggregator — CRUD and cost aggregation for recurring subscriptions.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
