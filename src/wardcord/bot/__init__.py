"""
Discord bot integration layer for Wardcord.

The ``cogs`` package holds the slash commands; startup and shutdown live in
``wardcord.main``.
"""
