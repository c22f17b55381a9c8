"""
Health payload for the Monitoring Lab API
"""

from typing import Dict


def create_health_payload(service_name: str, version: str) -> Dict[str, str]:
    """Fixed status payload; touches no store, cache or sink"""
    return {
        "status": "UP",
        "service": service_name,
        "version": version,
    }
