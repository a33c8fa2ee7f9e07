"""
Push Helper - The Veza push sequence run by the orchestrator's final step.

ensure provider -> push application (one data source per HubSpot app).
"""

from typing import Dict, Any


def execute_veza_push(
    veza_client,
    app,
    provider_name: str,
    provider_prefix: str,
    data_source_name: str,
) -> Dict[str, Any]:
    """Push `app` to Veza under the (prefixed) provider name.

    Returns:
        Dict with provider_name and veza_response.
    """
    full_provider_name = veza_client.generate_provider_name(provider_name, provider_prefix)

    veza_client.ensure_provider(full_provider_name)
    response = veza_client.push_application(app, full_provider_name, data_source_name)
    print(f"  Pushed to Veza as: {full_provider_name} (data source: {data_source_name})")

    return {
        "provider_name": full_provider_name,
        "veza_response": response,
    }
