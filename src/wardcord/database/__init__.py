"""
Database package for Wardcord.

Public API:
    - db_connection: Global ConnectionManager instance
    - ConnectionManager: Single aiosqlite connection with serialized writes
    - SchemaManager: Table creation and schema versioning
"""
