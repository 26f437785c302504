import logging

from openai import APIStatusError, APITimeoutError, OpenAI

from .base import ModelBackend
from .types import ModelRequest, ModelResponse

logger = logging.getLogger(__name__)


class OpenAIModelBackend(ModelBackend):
    """
    OpenAI chat-completions backend.

    Enabled when OPENAI_API_KEY is configured. Any OpenAI-compatible
    endpoint works through base_url.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.4,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        # Single attempt per turn
        self.client = OpenAI(api_key=api_key, base_url=self.base_url, max_retries=0)

    def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Generate a response with client.chat.completions.create.

        Args:
            request: ModelRequest with chat messages and timeout

        Returns:
            ModelResponse; never raises
        """
        base_metadata = {
            "backend": "openai",
            "model": self.model_name,
            "thread_id": request.thread_id,
        }

        try:
            completion = self.client.with_options(timeout=request.timeout_s).chat.completions.create(
                model=self.model_name,
                messages=request.messages,
                temperature=self.temperature,
            )

            output = ""
            if completion.choices:
                output = completion.choices[0].message.content or ""

            if not output.strip():
                return ModelResponse(
                    status="recoverable_error",
                    error_type="invalid_output",
                    metadata=base_metadata,
                )

            usage = completion.usage.model_dump() if completion.usage else None
            return ModelResponse(
                status="success",
                output=output.strip(),
                metadata={**base_metadata, "usage": usage},
            )

        except APITimeoutError:
            return ModelResponse(
                status="recoverable_error",
                error_type="timeout",
                metadata=base_metadata,
            )

        except APIStatusError as e:
            logger.error(
                f"OpenAI API error: {e.status_code}",
                extra={"status_code": e.status_code, "error_body": str(e)[:500]},
            )
            return ModelResponse(
                status="fatal_error",
                error_type="backend_unavailable",
                metadata={**base_metadata, "status_code": e.status_code},
            )

        except Exception as e:
            return ModelResponse(
                status="fatal_error",
                error_type="backend_unavailable",
                metadata={**base_metadata, "error": str(e)},
            )
