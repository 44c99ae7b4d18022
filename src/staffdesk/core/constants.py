"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_SLUG_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 255

# Password requirements
MIN_PASSWORD_LENGTH = 8
MIN_STRICT_PASSWORD_LENGTH = 12
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 100

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"

# Access control
SUPER_ADMIN_ROLE = "super-admin"
VIEW_DASHBOARD = "view-dashboard"
MANAGE_USERS = "manage-users"
MANAGE_ROLES = "manage-roles"
MANAGE_SETTINGS = "manage-settings"
CORE_ABILITIES = (VIEW_DASHBOARD, MANAGE_USERS, MANAGE_ROLES, MANAGE_SETTINGS)
ACCESS_CONTROL_TABLES = frozenset(
    {"users", "roles", "permissions", "role_permissions", "user_roles"}
)

# Rate limiting
ADMIN_API_LIMITER = "admin-api"
THROTTLED_MESSAGE = "Too many requests. Please retry in a minute."

# Background jobs
WELCOME_NOTIFICATION_JOB = "send_welcome_notification"
JOB_MAX_TRIES = 3
