"""
Module 01 - Schemas & Canonicalization
File: verification.py

Purpose: Check results for commitment verification.

A verification run is a list of named checks ("contract_locked",
"vhash_match", ...). The run fails as soon as one check fails; checks never
raise, so callers can report every outcome at once.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


CheckSeverity = Literal["info", "error"]


class CheckResult(BaseModel):
    """Outcome of one named check."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1, description="Stable check name")
    ok: bool
    severity: CheckSeverity
    message: str
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Values compared by the check (e.g. expected / computed vhash)",
    )

    @property
    def is_error(self) -> bool:
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, severity="info", message=message, details=details or {})

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, severity="error", message=message, details=details or {})


class VerificationResult(BaseModel):
    """All checks of one verification run, in the order they ran."""

    model_config = ConfigDict(extra="forbid")

    ok: bool = True
    checks: list[CheckResult] = Field(default_factory=list)

    @classmethod
    def success(cls) -> "VerificationResult":
        """Empty run; stays ok until a failing check is added."""
        return cls()

    def add_check(self, check: CheckResult) -> None:
        self.checks.append(check)
        if not check.ok:
            self.ok = False

    def get_failed_checks(self) -> list[CheckResult]:
        return [check for check in self.checks if not check.ok]

    def get_error_messages(self) -> list[str]:
        return [check.message for check in self.checks if check.is_error]
