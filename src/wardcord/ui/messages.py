"""
User-facing strings in every supported language.

Lookups fall back to English when a language or key is missing, so a new
message only has to exist in the English table to be usable.
"""

from __future__ import annotations

from typing import Dict

DEFAULT_LANGUAGE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "user_cannot_mute_themselves": "You cannot mute yourself!",
        "user_cannot_mute_bot": "You cannot mute me!",
        "user_cannot_mute_owner": "You cannot mute the owner of this server!",
        "bot_cannot_mute_target": "I cannot mute this member: their highest role is not below mine!",
        "user_cannot_mute_target": "You cannot mute this member: their highest role is not below yours!",
        "user_cannot_unmute_themselves": "You cannot unmute yourself!",
        "user_cannot_unmute_bot": "You cannot unmute me!",
        "user_cannot_unmute_owner": "You cannot unmute the owner of this server!",
        "bot_cannot_unmute_target": "I cannot unmute this member: their highest role is not below mine!",
        "user_cannot_unmute_target": "You cannot unmute this member: their highest role is not below yours!",
        "user_not_found": "I could not find this member in this server",
        "user_muted": "{user} has been muted",
        "user_unmuted": "{user} has been unmuted",
        "description_action_reason": "Reason: {reason}",
        "description_action_expires_at": "Expires: {expires}",
        "description_action_never_expires": "Expires: never",
        "action_issued_by": "Issued by {user}",
        "yes": "Yes",
        "no": "No",
        "channel_not_specified": "Not set",
        "invalid_setting_value": "Invalid setting value",
        "unknown_setting": "There is no setting called `{name}`",
        "setting_updated": "Setting `{name}` is now {value}",
        "settings_list_title": "Settings for this server",
        "command_failed": "Something went wrong while running this command. Please try again later.",
        "guild_only": "This command can only be used in a server.",
        "missing_permission": "You need the {permission} permission to use this command.",
        "invalid_duration": "Invalid duration `{value}`: use values like 30m, 1h30m, 2d or `permanent`",
        "default_welcome_message": "{0}, welcome to {1}",
        "roles_returned_reason": "Returning roles on rejoin",
    },
    "ru": {
        "user_cannot_mute_themselves": "Ты не можешь замутить самого себя!",
        "user_cannot_mute_bot": "Ты не можешь замутить меня!",
        "user_cannot_mute_owner": "Ты не можешь замутить владельца этого сервера!",
        "bot_cannot_mute_target": "Я не могу замутить этого участника: его высшая роль не ниже моей!",
        "user_cannot_mute_target": "Ты не можешь замутить этого участника: его высшая роль не ниже твоей!",
        "user_cannot_unmute_themselves": "Ты не можешь размутить самого себя!",
        "user_cannot_unmute_bot": "Ты не можешь размутить меня!",
        "user_cannot_unmute_owner": "Ты не можешь размутить владельца этого сервера!",
        "bot_cannot_unmute_target": "Я не могу размутить этого участника: его высшая роль не ниже моей!",
        "user_cannot_unmute_target": "Ты не можешь размутить этого участника: его высшая роль не ниже твоей!",
        "user_not_found": "Я не смог найти этого участника на сервере",
        "user_muted": "{user} был замучен",
        "user_unmuted": "{user} был размучен",
        "description_action_reason": "Причина: {reason}",
        "description_action_expires_at": "Закончится: {expires}",
        "description_action_never_expires": "Закончится: никогда",
        "action_issued_by": "Выдал {user}",
        "yes": "Да",
        "no": "Нет",
        "channel_not_specified": "Не указан",
        "invalid_setting_value": "Неверное значение настройки",
        "unknown_setting": "Настройки `{name}` не существует",
        "setting_updated": "Настройка `{name}` теперь {value}",
        "settings_list_title": "Настройки этого сервера",
        "command_failed": "При выполнении команды что-то пошло не так. Попробуй позже.",
        "guild_only": "Эту команду можно использовать только на сервере.",
        "missing_permission": "Для этой команды нужно право {permission}.",
        "invalid_duration": "Неверная длительность `{value}`: используй значения вроде 30m, 1h30m, 2d или `permanent`",
        "default_welcome_message": "{0}, добро пожаловать на сервер {1}",
        "roles_returned_reason": "Возвращение ролей при перезаходе",
    },
}

SUPPORTED_LANGUAGES = tuple(MESSAGES)


def get_message(key: str, language: str = DEFAULT_LANGUAGE, **fields: object) -> str:
    """Return message ``key`` in ``language`` with ``fields`` substituted."""
    table = MESSAGES.get(language, MESSAGES[DEFAULT_LANGUAGE])
    template = table.get(key) or MESSAGES[DEFAULT_LANGUAGE][key]
    return template.format(**fields) if fields else template
