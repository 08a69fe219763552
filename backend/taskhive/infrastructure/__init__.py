"""Infrastructure — database sessions, identity provider client, logging setup.

Design Decisions:
    - asyncpg driver for PostgreSQL; httpx for the identity provider REST API
"""
