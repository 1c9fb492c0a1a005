"""Configuration and result data structures for S-AES validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationConfig:
    """Configuration object for a validation run."""

    # Number of random (key, plaintext) pairs to round-trip
    num_tests: int = 100

    # Seed for reproducible random pairs; None draws from secrets
    seed: int | None = None

    # Report every check, not only failures
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.num_tests < 0:
            raise ValueError(f"num_tests must be >= 0, got {self.num_tests}")


@dataclass
class ValidationResult:
    """Outcome of a validation run, counted per check family."""

    kat_passed: int = 0
    kat_total: int = 0

    sbox_ok: bool = False

    random_passed: int = 0
    random_total: int = 0

    failures: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.kat_total + self.random_total + 1

    @property
    def total_passed(self) -> int:
        return self.kat_passed + self.random_passed + (1 if self.sbox_ok else 0)

    @property
    def passed(self) -> bool:
        return self.total_passed == self.total

    def add_failure(self, detail: str) -> None:
        self.failures.append(detail)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "passed": self.passed,
            "kat_passed": self.kat_passed,
            "kat_total": self.kat_total,
            "sbox_ok": self.sbox_ok,
            "random_passed": self.random_passed,
            "random_total": self.random_total,
            "failures": list(self.failures),
        }
