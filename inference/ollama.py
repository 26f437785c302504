import requests

from .base import ModelBackend
from .types import ModelRequest, ModelResponse


class OllamaModelBackend(ModelBackend):
    """
    Ollama backend for local model inference.

    Uses /api/chat so the system prompt and prior turns are passed as
    chat messages.
    """

    def __init__(self, model_name: str, base_url: str = "http://localhost:11434"):
        """
        Initialize Ollama backend.

        Args:
            model_name: Name of the model (e.g. "phi3:mini", "llama3")
            base_url:   Base URL of the Ollama service
        """
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")

    def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Generate a response using Ollama /api/chat.

        Args:
            request: ModelRequest with chat messages and timeout

        Returns:
            ModelResponse; never raises
        """
        base_metadata = {
            "backend": "ollama",
            "model": self.model_name,
            "thread_id": request.thread_id,
        }

        try:
            payload = {
                "model": self.model_name,
                "messages": request.messages,
                "stream": False,
            }

            resp = requests.post(
                f"{self.base_url}/api/chat",
                json=payload,
                timeout=request.timeout_s,
            )

            resp.raise_for_status()
            data = resp.json()
            output: str = data.get("message", {}).get("content", "")

            if not output.strip():
                return ModelResponse(
                    status="recoverable_error",
                    error_type="invalid_output",
                    metadata=base_metadata,
                )

            return ModelResponse(
                status="success",
                output=output.strip(),
                metadata=base_metadata,
            )

        except requests.Timeout:
            return ModelResponse(
                status="recoverable_error",
                error_type="timeout",
                metadata=base_metadata,
            )

        except Exception as e:
            return ModelResponse(
                status="fatal_error",
                error_type="backend_unavailable",
                metadata={**base_metadata, "error": str(e)},
            )
