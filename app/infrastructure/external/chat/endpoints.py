"""Rocket.Chat REST API v1 endpoint paths (relative to API_PREFIX)."""

API_PREFIX = "/api/v1"

USERS_CREATE = "users.create"
USERS_UPDATE = "users.update"
USERS_DELETE = "users.delete"
USERS_LIST = "users.list"
USERS_SET_AVATAR = "users.setAvatar"
USERS_RESET_AVATAR = "users.resetAvatar"
USERS_SET_ACTIVE_STATUS = "users.setActiveStatus"
USERS_LOGOUT_OTHER_CLIENTS = "users.logoutOtherClients"
LOGIN = "login"
LOGOUT = "logout"
IM_CREATE = "im.create"
IM_OPEN = "im.open"
CHAT_SEND_MESSAGE = "chat.sendMessage"
METHOD_CALL_SAVE_SETTINGS = "method.call/saveSettings"
PERMISSIONS_UPDATE = "permissions.update"

# errorType Rocket.Chat returns with HTTP 400 for unknown usernames/ids.
ERROR_INVALID_USER = "error-invalid-user"
