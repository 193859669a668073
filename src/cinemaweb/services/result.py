"""ServiceResult: what every service operation hands back to its caller.

Services never raise for expected failures (missing source, unreadable
dataset, unwritable output). They return ``ok=False`` with a coded
:class:`ServiceError`; the CLI maps that to exit status 1.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    NO_SOURCE = "NO_SOURCE"
    LOAD_FAILED = "LOAD_FAILED"
    WRITE_FAILED = "WRITE_FAILED"


class ServiceError(BaseModel):
    """Why an operation failed. ``detail`` holds machine-readable context."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: False when ``error`` explains a failure.
        op: Operation name, also the renderer key (``"build_graph"``, ``"layout"``).
        data: Payload of a successful call.
        warnings: Problems that did not stop the operation (dropped references).
        error: Set on failure.
        meta: Free-form extras not shown by default.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code.value, message=message, detail=detail),
        )
