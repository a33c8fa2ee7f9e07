"""
Settings — Default configuration values for the HubSpot OAA connector.

HubSpotOrchestrator reads each setting from the environment (a .env file is
loaded first when present) and falls back to DEFAULT_SETTINGS below. With
only an app id and an access token set, a dry run works against the public
HubSpot API.

Override order: CLI flags (--debug, --dry-run, --push, --full-sync) win over
environment variables, which win over DEFAULT_SETTINGS.

Settings reference:
  HUBSPOT_API_BASE_URL    HubSpot API root (default: https://api.hubapi.com)
  PROVIDER_NAME           Veza provider name, also used for output folder names
  PROVIDER_PREFIX         Optional prefix prepended to the Veza provider name
  OUTPUT_DIR              Run folders and execution_history.json live here
  OUTPUT_RETENTION_DAYS   Run folders older than this are deleted (0 = never)
  DRY_RUN                 Skip the Veza push (default: True)
  SAVE_JSON               Write oaa_payload.json for each run (default: True)
  DEBUG                   Verbose output (default: False)
  FULL_SYNC               Ignore the last successful run and fetch every company
  REQUEST_TIMEOUT         Seconds to wait on each HubSpot request
"""

PROVIDER_NAME = "HubSpot"

DEFAULT_API_BASE_URL = "https://api.hubapi.com"

# Page size for the legacy (v2) offset-paginated endpoints
LEGACY_MAX_PER_PAGE = 30

# Environment variable backing each IntegrationConfig field. All are required.
INSTANCE_CONFIG_FIELDS = {
    "app_id": "HUBSPOT_APP_ID",
    "oauth_access_token": "HUBSPOT_OAUTH_ACCESS_TOKEN",
    "api_base_url": "HUBSPOT_API_BASE_URL",
}

DEFAULT_SETTINGS = {
    "HUBSPOT_API_BASE_URL": DEFAULT_API_BASE_URL,
    "PROVIDER_NAME": PROVIDER_NAME,
    "PROVIDER_PREFIX": "",
    "OUTPUT_DIR": "./output",
    "OUTPUT_RETENTION_DAYS": 30,
    "DRY_RUN": True,
    "SAVE_JSON": True,
    "DEBUG": False,
    "FULL_SYNC": False,
    "REQUEST_TIMEOUT": 30,
}
