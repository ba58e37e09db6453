"""
Utility functions and helpers for Wardcord.

- **logger.py**: Centralized logging configuration with colored console output,
  per-session log files and prompt_toolkit based console printing.

- **format_utils.py**: Parsing of compact durations (``1h30m``, ``permanent``)
  and rendering of durations and mute deadlines.
"""
