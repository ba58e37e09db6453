"""
Wardcord - Discord moderation automation

Wardcord mutes and unmutes members on moderator command and keeps the
server's feedback channels informed about every action it takes.

Core Components:

- **Moderation pipeline**: Resolves the users involved, checks role seniority,
  applies or lifts the communication timeout and answers the moderator
- **Interaction checks**: Pure role-hierarchy rules with an async front end that
  fetches guild, roles and members
- **Audit logging**: Fans each applied action out to the public and private
  feedback channels without blocking the command
- **Guild Settings**: Typed, validated per-server options persisted to SQLite
- **Profiling**: Nested stage timers that log a breakdown for slow commands
"""
