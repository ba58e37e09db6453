"""
Moderation core.

- **interaction_checker.py**: Whether one member may mute or unmute another.
- **audit_logger.py**: Fan-out of applied actions to the feedback channels.
- **moderation_pipeline.py**: The mute and unmute flows end to end.

Refusals and missing targets are returned as results; only backend faults
raise.
"""
