"""Configuration module for the Multibase SDK.

Usage:
    from multibase.core.config import MultibaseConfig

    config = MultibaseConfig(token="mb_123").merge_with({"debug": True})
    for endpoint in config.endpoints():
        ...
"""

from multibase.core.config.settings import Endpoint, MultibaseConfig

__all__ = [
    "Endpoint",
    "MultibaseConfig",
]
