"""Infrastructure Layer — database, file storage client, and logging setup.

Invariants:
    - Infrastructure imports only errors, domain types, and protocols from core/
    - All external calls wrapped with timeout and error mapping

Design Decisions:
    - Thin wrappers over raw clients keep error mapping out of services
"""
