"""Error taxonomy for tree, sharing and family-code operations.

Validators return result objects for expected failures; services raise
these at the mutation boundary. Store errors are never wrapped.
"""
from __future__ import annotations

from dataclasses import dataclass


class FamtreeError(Exception):
    """Base class for all famtree errors."""


@dataclass
class NotFound(FamtreeError):
    """A tree, subfamily, member, grant, request or code does not exist."""

    kind: str
    identifier: str

    def __str__(self) -> str:
        return f"{self.kind} not found: {self.identifier}"


@dataclass
class MalformedInput(FamtreeError):
    """A payload has the wrong shape (e.g. members is not a list)."""

    reason: str

    def __str__(self) -> str:
        return self.reason


@dataclass
class ValidationFailed(FamtreeError):
    """An edge or date rule rejected a mutation."""

    reason: str
    code: str | None = None

    def __str__(self) -> str:
        if self.code:
            return f"{self.reason} ({self.code})"
        return self.reason


@dataclass
class Forbidden(FamtreeError):
    """The caller's role does not allow the requested operation."""

    reason: str
    required_role: str | None = None
    actual_role: str | None = None

    def __str__(self) -> str:
        return self.reason


@dataclass
class CodeSpaceExhausted(FamtreeError):
    """No unused family code was found within the retry budget."""

    attempts: int

    def __str__(self) -> str:
        return f"Failed to generate unique family code after {self.attempts} attempts"


@dataclass
class VersionConflict(FamtreeError):
    """The stored tree moved on since the caller loaded it."""

    owner_id: str
    expected: int
    actual: int

    def __str__(self) -> str:
        return (
            f"Tree {self.owner_id} is at version {self.actual}, "
            f"caller expected {self.expected}"
        )
