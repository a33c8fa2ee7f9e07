"""
Invocation validation — Checks configuration before any data is fetched.

Two checks, in order:
  1. Every IntegrationConfig field is set (no HTTP call is made otherwise).
  2. HubSpot accepts the access token (APIClient.verify_authentication).
"""

from dataclasses import asdict
from typing import List

from config import INSTANCE_CONFIG_FIELDS

from .errors import IntegrationValidationError
from .hubspot_client import create_api_client
from .types import IntegrationConfig


def missing_config_fields(config: IntegrationConfig) -> List[str]:
    """Return the environment variable names of every empty config field."""
    values = asdict(config)
    return [env_var for field_name, env_var in INSTANCE_CONFIG_FIELDS.items() if not values.get(field_name)]


def validate_invocation(config: IntegrationConfig, client=None) -> None:
    """Validate the configuration, then verify authentication.

    Args:
        config: The integration configuration to check.
        client: Optional APIClient to verify with; one is created if omitted.

    Raises:
        IntegrationValidationError: If any required field is empty.
        IntegrationProviderAuthenticationError: If HubSpot rejects the token.
    """
    missing = missing_config_fields(config)
    if missing:
        required = ", ".join(INSTANCE_CONFIG_FIELDS.values())
        raise IntegrationValidationError(
            f"Config requires all of {{{required}}} (missing: {', '.join(missing)})"
        )

    api_client = client or create_api_client(config)
    api_client.verify_authentication()
