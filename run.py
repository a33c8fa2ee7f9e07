#!/usr/bin/env python3
"""
HubSpot OAA Connector — Entry Point.

Extracts owners, roles, users and companies from a HubSpot account, builds a
Veza OAA CustomApplication, saves it as JSON, and optionally pushes it to Veza.

The extraction pipeline (managed by HubSpotOrchestrator) performs 8 steps:
  1. Validate configuration and verify the HubSpot access token
  2. Fetch roles
  3. Fetch owners (and each owner's user record for its role)
  4. Fetch companies modified since the last successful run
  5. Build a Veza OAA CustomApplication
  6. Wire owner->role and owner->company relationships
  7. Save the output as timestamped JSON files
  8. Push to Veza (unless dry run) and record the run as the new watermark

Usage:
    python run.py               # Extract and save JSON (dry run)
    python run.py --push        # Extract and push to Veza
    python run.py --debug       # Verbose output
    python run.py --full-sync   # Ignore the last successful run
    python run.py --version     # Show version
    python run.py --env /path   # Use alternate .env file
"""

import sys
import logging
import argparse
from pathlib import Path

from core import HubSpotOrchestrator

# Read version from the repo-root VERSION file (e.g., "0.1.0").
VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
VERSION = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"


def main():
    """Parse CLI arguments and run the extraction pipeline."""
    parser = argparse.ArgumentParser(
        description="HubSpot OAA Connector - Extract owners, roles and companies for Veza"
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--dry-run", action="store_true", help="Generate JSON only (no push)")
    parser.add_argument("--push", action="store_true", help="Push to Veza")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--full-sync", action="store_true", help="Fetch all companies, ignoring the last run")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    args = parser.parse_args()

    if args.version:
        print(f"hubspot-oaa-connector {VERSION}")
        sys.exit(0)

    # Initialize the orchestrator (loads .env and builds internal config)
    orchestrator = HubSpotOrchestrator(env_file=args.env)

    # Apply CLI overrides on top of .env values
    if args.dry_run:
        orchestrator.dry_run = True
    if args.push:
        orchestrator.dry_run = False
    if args.debug:
        orchestrator.debug = True
    if args.full_sync:
        orchestrator.full_sync = True

    if orchestrator.debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
        logging.getLogger("oaaclient").setLevel(logging.DEBUG)
        logging.getLogger("urllib3").setLevel(logging.DEBUG)

    print(f"\n{'='*60}")
    print(f"HUBSPOT OAA CONNECTOR v{VERSION}")
    print("="*60)
    print(f"Mode: {'DRY RUN' if orchestrator.dry_run else 'LIVE PUSH'}")
    print(f"API: {orchestrator.config.api_base_url}")
    print(f"App ID: {orchestrator.config.app_id}")

    # Validate required configuration before proceeding
    if not orchestrator.validate_config():
        sys.exit(1)

    # Cleanup old output folders based on retention policy
    if orchestrator.output_manager.retention_days > 0:
        deleted = orchestrator.output_manager.cleanup_old_folders(orchestrator.debug)
        if deleted > 0:
            print(f"Cleaned up {deleted} old output folder(s)")

    results = orchestrator.run()
    orchestrator.print_summary(results)

    if not results.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
