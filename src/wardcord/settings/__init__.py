"""
Per-guild settings.

- **options.py**: Option descriptors (bool, string, snowflake, enum, time span)
  implementing get/set/display over a guild's settings mapping.
- **guild_settings.py**: The catalog of options every guild has.
- **guild_settings_manager.py**: In-memory owner of all mappings with
  background persistence.
"""
