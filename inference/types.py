from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Literal

ModelStatus = Literal["success", "recoverable_error", "fatal_error"]


@dataclass
class ModelRequest:
    task: str                          # "respond"
    messages: List[Dict[str, str]] = field(default_factory=list)  # chat format
    timeout_s: Optional[float] = 30
    thread_id: Optional[str] = None


@dataclass
class ModelResponse:
    status: ModelStatus
    output: Optional[str] = None
    error_type: Optional[str] = None   # timeout | invalid_output | backend_unavailable
    metadata: Optional[Dict[str, Any]] = None
