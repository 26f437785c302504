"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the store, reply generator and pipeline
from configuration. Routers reach the pipeline through get_pipeline(),
a FastAPI dependency that tests override.
"""

import logging
from typing import Optional

from agent.memory import ConversationStore
from agent.pipeline import ConversationPipeline
from agent.reply import ReplyGenerator

from .config import InfraConfig, get_config

logger = logging.getLogger(__name__)


class InfraBootstrap:
    """
    Bootstrap infrastructure based on configuration.

    Singleton pattern - single instance per process. The conversation store
    created here is the single authority for all transcripts.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(self, config: Optional[InfraConfig] = None):
        """Initialize bootstrap with configuration."""
        self.config = config or get_config()
        self.store = self.config.create_store()
        self.reply_generator = self.config.create_reply_generator()
        self.pipeline = ConversationPipeline(
            store=self.store,
            generator=self.reply_generator,
            reply_timeout_s=self.config.reply_timeout_s,
            fallback_reply=self.config.fallback_reply,
        )
        logger.info(f"Infrastructure ready: {self!r}")

    @classmethod
    def get_instance(cls, config: Optional[InfraConfig] = None) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def current(cls) -> Optional["InfraBootstrap"]:
        """Instance if already bootstrapped, without creating one."""
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def get_store(self) -> ConversationStore:
        """Get conversation store."""
        return self.store

    def get_reply_generator(self) -> ReplyGenerator:
        """Get reply generator."""
        return self.reply_generator

    def get_pipeline(self) -> ConversationPipeline:
        """Get conversation pipeline."""
        return self.pipeline

    def __repr__(self) -> str:
        """String representation showing configured backends."""
        return (
            f"InfraBootstrap(store={self.config.store_backend}, "
            f"reply={self.config.reply_mode}, "
            f"timeout={self.config.reply_timeout_s}s)"
        )


def bootstrap_infrastructure(config: Optional[InfraConfig] = None) -> InfraBootstrap:
    """
    Bootstrap all infrastructure backends.

    Args:
        config: Optional custom configuration

    Returns:
        InfraBootstrap instance with all backends initialized
    """
    return InfraBootstrap.get_instance(config)


def get_pipeline() -> ConversationPipeline:
    """FastAPI dependency: the process-wide conversation pipeline."""
    return bootstrap_infrastructure().get_pipeline()
