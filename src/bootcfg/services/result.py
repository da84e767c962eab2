"""ServiceResult and ServiceError — the startup stage contract.

INVARIANT: Every startup stage returns ServiceResult.
Collaborators raise; stages catch at their boundary and report a failed
result. The orchestrator stops at the first result with ``ok=False``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

VALIDATION_ERROR = "VALIDATION_ERROR"
IO_ERROR = "IO_ERROR"
CONFIG_FORMAT_ERROR = "CONFIG_FORMAT_ERROR"
STORE_ERROR = "STORE_ERROR"
TRANSPORT_ERROR = "TRANSPORT_ERROR"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all startup stages.

    Attributes:
        ok: Whether the stage succeeded.
        op: Name of the stage (e.g. ``"validate"``).
        data: Stage-specific payload on success.
        warnings: Non-fatal issues encountered during the stage.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls, op: str, code: str, message: str, **detail: Any
    ) -> ServiceResult:
        """Build a failed result for *op*."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
