"""Explicit caller identity passed into access-checked operations."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthContext:
    """Who is making the call.

    Built by the request boundary from whatever session mechanism it uses
    and handed to services; nothing in the core reads ambient session state.
    """

    user_id: str
    email: str | None = None
