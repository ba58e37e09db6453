"""
Application configuration for Wardcord.

- **app_configuration.py**: YAML-backed ``AppConfig`` with typed accessors for
  the database path, the profiler threshold and the platform timeout ceiling.
"""
