"""Database Infrastructure — SQLAlchemy declarative base for the mirrored tables.

Invariants:
    - Tables are owned by the external store; this package only reads them
"""
