"""
Infrastructure module exports.

Configuration and bootstrap for the store and reply backends.
"""

from .config import InfraConfig, get_config, StoreBackendType, ReplyBackendType
from .bootstrap import InfraBootstrap, bootstrap_infrastructure, get_pipeline

__all__ = [
    "InfraConfig",
    "get_config",
    "StoreBackendType",
    "ReplyBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
    "get_pipeline",
]
