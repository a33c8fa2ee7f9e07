from .settings import (
    DEFAULT_SETTINGS,
    DEFAULT_API_BASE_URL,
    INSTANCE_CONFIG_FIELDS,
    LEGACY_MAX_PER_PAGE,
    PROVIDER_NAME,
)
