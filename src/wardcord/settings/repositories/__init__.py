"""
Repository layer for settings persistence.

Repositories hold the SQL for one table each and take an open
``aiosqlite.Connection``; transactions are managed by the caller.
"""
