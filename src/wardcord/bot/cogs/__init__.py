"""
Discord command cogs for Wardcord.

Each module exposes a ``setup(bot)`` function that registers its cog.
"""
