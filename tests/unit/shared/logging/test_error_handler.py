"""Tests for API error reports.

Verifies: code, status, session id and masked details in the logged record;
tracebacks only for unexpected server failures.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import uuid4

from stakemate.shared.errors import NotFoundError, SessionLimitError
from stakemate.shared.logging import configure_logging
from stakemate.shared.logging.error_handler import (
    REDACTED,
    ErrorReport,
    redact,
    report_error,
)

if TYPE_CHECKING:
    import pytest

_LOGGER = "test.error_handler"


class TestRedact:
    def test_masks_profile_values(self) -> None:
        result = redact({"name": "Amina", "risk_tolerance": "low", "message_length": 12})
        assert result == {"name": REDACTED, "risk_tolerance": REDACTED, "message_length": 12}

    def test_masks_camel_case_and_credentials(self) -> None:
        result = redact({"riskTolerance": "high", "Authorization": "Bearer x"})
        assert result == {"riskTolerance": REDACTED, "Authorization": REDACTED}

    def test_masks_nested(self) -> None:
        result = redact({"profile": {"User_Name": "Amina", "turn": 3}})
        assert result == {"profile": {"User_Name": REDACTED, "turn": 3}}

    def test_absent_values_stay_none(self) -> None:
        assert redact({"name": None}) == {"name": None}

    def test_input_untouched(self) -> None:
        details = {"name": "Amina"}
        redact(details)
        assert details == {"name": "Amina"}


class TestErrorReport:
    def test_log_fields_mask_details(self) -> None:
        report = ErrorReport(
            code="SESSION_LIMIT",
            message="Session limit reached: 1",
            status=429,
            details={"limit": 1, "name": "Amina"},
        )
        assert report.log_fields() == {
            "error_code": "SESSION_LIMIT",
            "status": 429,
            "session_id": None,
            "details": {"limit": 1, "name": REDACTED},
        }

    def test_stack_included_when_present(self) -> None:
        report = ErrorReport(code="X", message="m", status=500, stack="Traceback ...")
        assert report.log_fields()["stack"] == "Traceback ..."


class TestReportError:
    def test_domain_error_at_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        session_id = uuid4()
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            report = report_error(
                logging.getLogger(_LOGGER),
                NotFoundError("Session", str(session_id)),
                status=404,
                session_id=session_id,
            )
        [record] = caplog.records
        assert record.levelno == logging.WARNING
        assert record.error_report["error_code"] == "NOT_FOUND"  # type: ignore[attr-defined]
        assert record.error_report["session_id"] == str(session_id)  # type: ignore[attr-defined]
        assert report.stack is None

    def test_unexpected_failure_carries_stack(self, caplog: pytest.LogCaptureFixture) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError as exc:
            with caplog.at_level(logging.ERROR, logger=_LOGGER):
                report = report_error(
                    logging.getLogger(_LOGGER),
                    exc,
                    status=500,
                    details={"name": "Amina", "message_length": 5},
                    code="DIALOGUE_FAILED",
                )
        assert report.code == "DIALOGUE_FAILED"
        assert report.stack is not None
        assert "RuntimeError: boom" in report.stack
        [record] = caplog.records
        assert record.levelno == logging.ERROR
        assert record.error_report["details"] == {  # type: ignore[attr-defined]
            "name": REDACTED,
            "message_length": 5,
        }

    def test_plain_exception_code_is_class_name(self) -> None:
        report = report_error(logging.getLogger(_LOGGER), ValueError("x"), status=400)
        assert report.code == "ValueError"
        assert report.stack is None

    def test_domain_error_never_carries_stack(self) -> None:
        report = report_error(logging.getLogger(_LOGGER), SessionLimitError(3), status=500)
        assert report.code == "SESSION_LIMIT"
        assert report.stack is None


class TestConfigureLogging:
    def test_sets_root_level(self) -> None:
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)

    def test_unknown_level_falls_back_to_info(self) -> None:
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("chatty")
            assert root.level == logging.INFO
        finally:
            root.setLevel(previous)
