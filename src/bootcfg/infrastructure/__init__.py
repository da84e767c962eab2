"""Infrastructure layer — the SQLite-backed group store.

This layer depends on stdlib and SQLAlchemy plus the domain models it
persists. It must never import from services, server, or output.
"""
