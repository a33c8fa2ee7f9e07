"""
hubspot-oaa-shared — Platform plumbing for the HubSpot OAA connector.

  output_manager.py  Timestamped output directories and retention-based
                     cleanup of old runs.
  veza_client.py     Veza provider lookup/creation and application push.
  push_helper.py     The ensure-provider -> push sequence.

Nothing here knows about HubSpot; the connector-specific pipeline lives in
the core package.
"""

from .output_manager import OutputManager, sanitize_name
from .veza_client import VezaClient
from .push_helper import execute_veza_push
