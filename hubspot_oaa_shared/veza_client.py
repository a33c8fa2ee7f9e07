"""
Veza Client — Provider and push operations against the Veza OAA API.

Wraps oaaclient.client.OAAClient, created lazily so dry runs never need
Veza credentials or network access.
"""

from typing import Dict, Optional

from .output_manager import sanitize_name


class VezaClient:
    """Manages the Veza API interactions the connector needs.

    Attributes:
        veza_url: Veza tenant URL.
        veza_api_key: Veza API key.
        debug: If True, print provider lookups.
    """

    def __init__(self, veza_url: str, veza_api_key: str, debug: bool = False):
        self.veza_url = veza_url
        self.veza_api_key = veza_api_key
        self.debug = debug
        self._client = None

    def _get_client(self):
        """Lazy-load the OAA client."""
        if self._client is None:
            from oaaclient.client import OAAClient
            self._client = OAAClient(url=self.veza_url, api_key=self.veza_api_key)
        return self._client

    def get_provider(self, provider_name: str) -> Optional[Dict]:
        return self._get_client().get_provider(provider_name)

    def ensure_provider(self, provider_name: str) -> Dict:
        """Return the named custom provider, creating it if it doesn't exist."""
        provider = self.get_provider(provider_name)
        if provider:
            if self.debug:
                print(f"  Using existing provider: {provider_name}")
            return provider

        if self.debug:
            print(f"  Creating provider: {provider_name}")
        return self._get_client().create_provider(provider_name, "application")

    def push_application(self, app, provider_name: str, data_source_name: str) -> Dict:
        return self._get_client().push_application(
            provider_name=provider_name,
            data_source_name=data_source_name,
            application_object=app,
        )

    @staticmethod
    def generate_provider_name(name: str, prefix: str = "") -> str:
        """Sanitized provider name, with `prefix_` prepended when given."""
        safe_name = sanitize_name(name)
        return f"{prefix}_{safe_name}" if prefix else safe_name
