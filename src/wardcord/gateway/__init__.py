"""
Platform boundary.

``protocols.py`` declares what the moderation core needs from the platform;
``discord_gateway.py`` provides it on top of a py-cord client.
"""
