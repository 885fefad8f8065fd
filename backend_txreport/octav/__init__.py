"""
Octav blockchain analytics API client.
"""

from backend_txreport.octav.client import OctavClient  # noqa: F401

__all__ = ["OctavClient"]
