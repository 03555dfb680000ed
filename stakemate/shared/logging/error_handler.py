"""Error reports for the dialogue gateway.

Every error the API turns into a response is logged once, as one record:
- ``error_report`` extra with code, HTTP status, session id and details
- profile values (name, risk tolerance) and credentials in details are masked
- a traceback only for unexpected failures (status >= 500, non-domain error)
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stakemate.shared.errors import StakemateError

if TYPE_CHECKING:
    from collections.abc import Mapping

REDACTED = "[REDACTED]"

# Compared case-insensitively; covers both wire spellings of the profile.
PRIVATE_FIELDS = frozenset(
    {
        "name",
        "user_name",
        "risk_tolerance",
        "risktolerance",
        "user_risk_tolerance",
        "authorization",
        "cookie",
        "token",
        "api_key",
    }
)


def redact(details: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``details`` with private values masked, nested mappings included."""
    masked: dict[str, Any] = {}
    for key, value in details.items():
        if key.lower() in PRIVATE_FIELDS:
            masked[key] = REDACTED if value is not None else None
        elif isinstance(value, dict):
            masked[key] = redact(value)
        else:
            masked[key] = value
    return masked


@dataclass(frozen=True)
class ErrorReport:
    """One logged API error."""

    code: str
    message: str
    status: int
    session_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    stack: str | None = None

    def log_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "error_code": self.code,
            "status": self.status,
            "session_id": self.session_id,
            "details": redact(self.details),
        }
        if self.stack:
            fields["stack"] = self.stack
        return fields


def report_error(
    logger: logging.Logger,
    exc: Exception,
    *,
    status: int,
    session_id: object = None,
    details: Mapping[str, Any] | None = None,
    code: str = "",
) -> ErrorReport:
    """Log ``exc`` as an ErrorReport and return it.

    The report code is ``code`` if given, else the domain error code or the
    exception class name. Non-domain server errors carry the traceback.
    Client errors log at WARNING, server errors at ERROR.
    """
    domain = isinstance(exc, StakemateError)
    stack = None
    if not domain and status >= 500:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    report = ErrorReport(
        code=code or (exc.code if domain else type(exc).__name__),
        message=str(exc),
        status=status,
        session_id=str(session_id) if session_id is not None else None,
        details=dict(details or {}),
        stack=stack,
    )
    level = logging.ERROR if status >= 500 else logging.WARNING
    logger.log(
        level,
        "API error %s (%d) session_id=%s: %s",
        report.code,
        status,
        report.session_id,
        report.message,
        extra={"error_report": report.log_fields()},
    )
    return report
