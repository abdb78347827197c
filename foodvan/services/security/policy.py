"""
Password Policy

Declarative password rules: length bounds plus patterns that must
each match somewhere in the password. Evaluated before hashing and
independent of the hasher.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from foodvan.auth.exceptions import WeakPassword


@dataclass(frozen=True)
class PolicyViolation:
    """Why a password was rejected."""
    rule: str
    reason: str


@dataclass(frozen=True)
class PolicyResult:
    ok: bool
    violation: Optional[PolicyViolation] = None


@dataclass(frozen=True)
class PasswordPolicy:
    """
    Length bounds and required character classes.

    Attributes:
        min_length: Shortest accepted password
        max_bytes: Longest accepted password, UTF-8 encoded (bcrypt input limit)
        patterns: (rule name, regex) pairs; each regex must match at least once
        message: Text reported to the client on any violation
        too_long_message: Text reported for a password over max_bytes
    """
    min_length: int = 8
    max_bytes: int = 72
    patterns: tuple[tuple[str, str], ...] = field(
        default=(
            ("letter", r"[a-zA-Z]"),
            ("digit", r"[0-9]"),
        )
    )
    message: str = WeakPassword.default_message
    too_long_message: str = "The password must be at most 72 bytes"

    def validate(self, password: Optional[str]) -> PolicyResult:
        """Evaluate the policy. Pure: no side effects, never raises."""
        if not isinstance(password, str) or len(password) < self.min_length:
            return PolicyResult(
                ok=False,
                violation=PolicyViolation(
                    rule="min_length",
                    reason=f"must be at least {self.min_length} characters",
                ),
            )
        if len(password.encode("utf-8")) > self.max_bytes:
            return PolicyResult(
                ok=False,
                violation=PolicyViolation(
                    rule="max_bytes",
                    reason=f"must be at most {self.max_bytes} bytes",
                ),
            )
        for rule, pattern in self.patterns:
            if not re.search(pattern, password):
                return PolicyResult(
                    ok=False,
                    violation=PolicyViolation(rule=rule, reason=f"must contain at least one {rule}"),
                )
        return PolicyResult(ok=True)

    def check(self, password: Optional[str]) -> None:
        """Raise WeakPassword if the password breaks the policy."""
        result = self.validate(password)
        if result.ok:
            return
        if result.violation.rule == "max_bytes":
            raise WeakPassword(self.too_long_message)
        raise WeakPassword(self.message)
