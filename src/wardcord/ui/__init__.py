"""
User-facing text and embeds.

- **messages.py**: Localized message catalog (English, Russian).
- **action_embed.py**: Feedback and audit embed builders.
"""
