"""
Output Manager — Timestamped run folders, JSON writing, and retention cleanup.

Each run writes into {base_dir}/YYYYMMDD_HHMM_{provider_name}, e.g.
"20260220_1430_HubSpot", containing:
  - oaa_payload.json:        The OAA CustomApplication payload
  - extraction_results.json: Run metadata, entity counts, errors

Run folders older than retention_days are removed before a new run starts
(retention_days=0 keeps everything). Other files in base_dir, such as the
execution history, never match the folder pattern and are left alone.
"""

import os
import re
import json
import shutil
from datetime import datetime, timedelta
from typing import Any, Optional

RUN_FOLDER_PATTERN = re.compile(r'^(\d{8}_\d{4})_.+$')


def sanitize_name(name: str) -> str:
    """Keep alphanumerics, dashes and underscores; replace everything else."""
    return "".join(c if c.isalnum() or c in '-_' else '_' for c in name)


class OutputManager:
    """Manages per-run output folders.

    Attributes:
        base_dir: Root output directory.
        provider_name: Used in folder naming.
        retention_days: Delete run folders older than this (0 = never).
        current_dir: The current run's folder, or None until created.
    """

    def __init__(self, base_dir: str, provider_name: str, retention_days: int = 30):
        self.base_dir = base_dir
        self.provider_name = provider_name
        self.retention_days = retention_days
        self.current_dir: Optional[str] = None
        self._run_timestamp = datetime.now()

    def create_timestamped_dir(self) -> str:
        folder_name = f"{self._run_timestamp.strftime('%Y%m%d_%H%M')}_{sanitize_name(self.provider_name)}"
        self.current_dir = os.path.join(self.base_dir, folder_name)
        os.makedirs(self.current_dir, exist_ok=True)
        return self.current_dir

    def get_output_path(self, filename: str) -> str:
        """Resolve `filename` inside the current run folder.

        Raises:
            RuntimeError: If create_timestamped_dir() has not been called yet.
        """
        if not self.current_dir:
            raise RuntimeError("Output directory not created. Call create_timestamped_dir() first.")
        return os.path.join(self.current_dir, filename)

    def write_json(self, filename: str, data: Any) -> str:
        """Write `data` as indented JSON into the current run folder."""
        path = self.get_output_path(filename)
        with open(path, "w") as f:
            json.dump(data, f, indent=2, default=str)
        return path

    def cleanup_old_folders(self, debug: bool = False) -> int:
        """Delete run folders older than retention_days.

        Returns:
            The number of folders deleted.
        """
        if self.retention_days <= 0 or not os.path.isdir(self.base_dir):
            return 0

        cutoff = datetime.now() - timedelta(days=self.retention_days)
        deleted = 0

        for folder_name in sorted(os.listdir(self.base_dir)):
            folder_path = os.path.join(self.base_dir, folder_name)
            match = RUN_FOLDER_PATTERN.match(folder_name)
            if not match or not os.path.isdir(folder_path):
                continue

            try:
                if datetime.strptime(match.group(1), "%Y%m%d_%H%M") >= cutoff:
                    continue
                shutil.rmtree(folder_path)
                deleted += 1
                if debug:
                    print(f"  Deleted old output folder: {folder_name}")
            except (ValueError, OSError) as e:
                print(f"  Warning: Could not process folder {folder_name}: {e}")

        return deleted
