"""Infrastructure Layer — database, stores, authentication and logging.

Invariants:
    - Stores implement the Protocols in core/repository_protocols.py
    - SQLAlchemy errors are mapped to DatabaseError at the session boundary
"""
