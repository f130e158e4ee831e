"""Core Layer — pure access and lifecycle rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or models/
    - All functions are pure and deterministic given their arguments

Design Decisions:
    - Functional core separated from imperative shell
"""
