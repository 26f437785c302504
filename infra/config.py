"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Defaults need no external service: in-memory store, rule-based replies.
"""

import os
from typing import Optional, Literal
from dataclasses import dataclass

from agent.memory import ConversationStore, InMemoryConversationStore, SQLiteConversationStore
from agent.pipeline import DEFAULT_FALLBACK_REPLY, DEFAULT_REPLY_TIMEOUT_S
from agent.reply import ModelReplyGenerator, ReplyGenerator, RuleBasedReplyGenerator
from inference import ModelBackend, StubModelBackend, OllamaModelBackend, OpenAIModelBackend


StoreBackendType = Literal["memory", "sqlite"]
ReplyBackendType = Literal["rules", "openai", "ollama", "stub"]


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Store
    store_backend: StoreBackendType
    sqlite_db_path: str

    # Reply generation
    reply_backend: ReplyBackendType
    openai_api_key: Optional[str]
    openai_model: str
    openai_base_url: str
    ollama_model: str
    ollama_base_url: str

    # Pipeline
    reply_timeout_s: float
    fallback_reply: str

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        REPLY_BACKEND defaults to "openai" when OPENAI_API_KEY is set,
        otherwise to "rules".
        """
        openai_api_key = os.getenv("OPENAI_API_KEY") or None
        default_reply_backend = "openai" if openai_api_key else "rules"

        return cls(
            # Store Configuration
            store_backend=(os.getenv("STORE_BACKEND") or "memory").lower(),  # type: ignore
            sqlite_db_path=os.getenv("SQLITE_DB_PATH") or ":memory:",

            # Reply Configuration
            reply_backend=(os.getenv("REPLY_BACKEND") or default_reply_backend).lower(),  # type: ignore
            openai_api_key=openai_api_key,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            ollama_model=os.getenv("OLLAMA_MODEL", "phi"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),

            # Pipeline Configuration
            reply_timeout_s=float(os.getenv("REPLY_TIMEOUT_S", str(DEFAULT_REPLY_TIMEOUT_S))),
            fallback_reply=os.getenv("FALLBACK_REPLY") or DEFAULT_FALLBACK_REPLY,
        )

    def create_store(self) -> ConversationStore:
        """Create conversation store instance based on configuration."""
        if self.store_backend == "sqlite":
            return SQLiteConversationStore(db_path=self.sqlite_db_path)
        # Default to in-memory
        return InMemoryConversationStore()

    def create_model_backend(self) -> Optional[ModelBackend]:
        """Create LLM backend instance, or None for rule-based replies."""
        if self.reply_backend == "openai":
            if not self.openai_api_key:
                # No key, nothing to call
                return None
            return OpenAIModelBackend(
                api_key=self.openai_api_key,
                model_name=self.openai_model,
                base_url=self.openai_base_url,
            )
        elif self.reply_backend == "ollama":
            return OllamaModelBackend(
                model_name=self.ollama_model,
                base_url=self.ollama_base_url,
            )
        elif self.reply_backend == "stub":
            return StubModelBackend()
        return None

    def create_reply_generator(self) -> ReplyGenerator:
        """Create reply generator: model-backed when a backend exists, rules otherwise."""
        backend = self.create_model_backend()
        if backend is None:
            return RuleBasedReplyGenerator()
        return ModelReplyGenerator(backend=backend, timeout_s=self.reply_timeout_s)

    @property
    def reply_mode(self) -> str:
        """Effective reply mode after key availability is taken into account."""
        if self.reply_backend == "openai" and not self.openai_api_key:
            return "rules"
        if self.reply_backend in ("openai", "ollama", "stub"):
            return self.reply_backend
        return "rules"


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
