"""Services Layer — the imperative shell around core/ access and lifecycle rules.

Invariants:
    - Services load fresh state, call pure core checks, then write
    - Each service method commits at most once

Design Decisions:
    - One service per caller-facing concern (access, applications, saved jobs, apply)
"""
