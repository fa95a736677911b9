"""Typed views over free-form JSON values.

Custom member fields and AI-produced insight bodies arrive as arbitrary
JSON. Consumers branch on one of these variants instead of stringifying
whatever they were handed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Union


@dataclass(frozen=True)
class TextContent:
    text: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class ListContent:
    items: tuple[str, ...]
    kind: Literal["list"] = "list"


@dataclass(frozen=True)
class SummaryContent:
    """An object carrying a ``summary`` string plus any other keys."""

    summary: str
    details: dict[str, Any] = field(default_factory=dict)
    kind: Literal["summary"] = "summary"


@dataclass(frozen=True)
class ObjectContent:
    data: dict[str, Any]
    kind: Literal["object"] = "object"


@dataclass(frozen=True)
class UnrecognizedContent:
    raw: Any
    type_name: str
    kind: Literal["unrecognized"] = "unrecognized"


ContentValue = Union[
    TextContent, ListContent, SummaryContent, ObjectContent, UnrecognizedContent
]


def classify_content(value: Any) -> ContentValue:
    """Map a JSON value onto the variant that describes its shape."""
    if isinstance(value, str):
        return TextContent(text=value)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return ListContent(items=tuple(value))
    if isinstance(value, dict):
        summary = value.get("summary")
        if isinstance(summary, str):
            details = {k: v for k, v in value.items() if k != "summary"}
            return SummaryContent(summary=summary, details=details)
        return ObjectContent(data=dict(value))
    return UnrecognizedContent(raw=value, type_name=type(value).__name__)
