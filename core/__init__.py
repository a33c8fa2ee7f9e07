"""
Core package — The HubSpot extraction pipeline modules.

  orchestrator.py         Pipeline coordination (Steps 1-8)
  hubspot_client.py       HTTP communication with HubSpot (Steps 1-4)
  pagination.py           Cursor and offset pagination strategies
  types.py                Typed config, history, and payload records
  errors.py               Typed connector exceptions
  validation.py           Configuration validation + auth probe (Step 1)
  entity_extractor.py     Fetch steps and entity converters (Steps 2-4)
  application_builder.py  Build OAA CustomApplication structure (Step 5)
  relationship_builder.py Wire owner->role and owner->company (Step 6)
  execution_history.py    Last-successful-run watermark persistence
"""

from .errors import (
    IntegrationError,
    IntegrationProviderAPIError,
    IntegrationProviderAuthenticationError,
    IntegrationValidationError,
)
from .types import (
    Company,
    ExecutionHistory,
    IntegrationConfig,
    LastSuccessfulRun,
    Owner,
    Role,
    User,
)
from .hubspot_client import APIClient, create_api_client
from .validation import validate_invocation
from .entity_extractor import EntityExtractor
from .execution_history import ExecutionHistoryStore
from .orchestrator import HubSpotOrchestrator
