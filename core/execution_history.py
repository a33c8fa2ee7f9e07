"""
Execution History Store — Persists the last successful run between runs.

The companies step is incremental: it asks HubSpot only for companies
modified since the last successful run started. Veza replaces the whole data
source on every push, so the store also keeps the company entities that run
pushed; the next run applies its changes to that set. Both live in
{output_dir}/execution_history.json:

    {
      "last_successful": {"started_on": 1718000000000},
      "companies": {"5001": {"id": "5001", "name": "...", ...}},
      "updated_at": "2024-06-10T06:13:20+00:00"
    }

A missing or unreadable file means "no previous run", which makes the next
run a full sync. So does a watermark saved without its company set.
"""

import os
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .types import ExecutionHistory, LastSuccessfulRun


class ExecutionHistoryStore:
    """Loads and saves ExecutionHistory between runs."""

    HISTORY_FILENAME = "execution_history.json"

    def __init__(self, output_dir: str, debug: bool = False):
        self.output_dir = output_dir
        self.debug = debug
        self._history_path = os.path.join(output_dir, self.HISTORY_FILENAME)

    def load(self) -> ExecutionHistory:
        """Load the previous run's history. Returns an empty history if none."""
        if not os.path.exists(self._history_path):
            if self.debug:
                print(f"  No execution history found at {self._history_path}")
            return ExecutionHistory()

        try:
            with open(self._history_path, 'r') as f:
                data = json.load(f)
            started_on = (data.get("last_successful") or {}).get("started_on")
            companies = data.get("companies")
        except (json.JSONDecodeError, IOError, AttributeError) as e:
            print(f"  Warning: Could not read execution history, running full sync: {e}")
            return ExecutionHistory()

        if not isinstance(started_on, int) or isinstance(started_on, bool):
            return ExecutionHistory()

        if not isinstance(companies, dict):
            print("  Warning: Execution history has no company snapshot, running full sync")
            return ExecutionHistory()

        if self.debug:
            print(f"  Last successful run started at {started_on} ({len(companies)} companies)")

        return ExecutionHistory(
            last_successful=LastSuccessfulRun(started_on=started_on),
            companies=companies,
        )

    def record_success(self, started_on: int, companies: Optional[List[Dict[str, Any]]] = None) -> str:
        """Save `started_on` (epoch ms) and the pushed company entities."""
        os.makedirs(self.output_dir, exist_ok=True)

        history_data = {
            "last_successful": {"started_on": started_on},
            "companies": {company["id"]: company for company in companies or []},
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        with open(self._history_path, 'w') as f:
            json.dump(history_data, f, indent=2)

        if self.debug:
            print(f"  Saved execution history to {self._history_path}")

        return self._history_path

    def get_history_path(self) -> str:
        return self._history_path
