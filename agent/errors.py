"""
Pipeline error taxonomy.

Only PipelineError subclasses leave the pipeline. Channel adapters convert
them into transport responses; nothing else crosses the adapter boundary.
"""


class PipelineError(Exception):
    """Base class for errors raised at or above the pipeline boundary."""
    pass


class BadRequestError(PipelineError):
    """
    Request cannot be processed as sent (missing thread id, empty message,
    undecodable body). Never retried.
    """

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class ReplyGenerationError(Exception):
    """
    Reply generator could not produce a reply.

    Raised by generators, recovered inside the pipeline with the fallback
    reply. Never surfaced to a transport.
    """

    def __init__(self, message: str, error_type: str = "backend_unavailable"):
        self.error_type = error_type
        super().__init__(message)
