"""Result-size safety policies.

Two policies, never combined in one operation:

- ``enforce_ceiling`` runs before the request and rejects unbounded reads.
- ``trim_result`` runs after the response and truncates oversized arrays.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import re
from typing import Any

from hasura_mcp.errors import RequestValidationError

ROW_CEILING = 100

_PLAIN_KEY_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


def enforce_ceiling(limit: int | None, force: bool = False, ceiling: int = ROW_CEILING) -> None:
    """Reject a request whose *limit* is missing or above *ceiling*, unless *force*."""
    if force:
        return
    if limit is None or limit > ceiling:
        raise RequestValidationError(
            f"Query requires limit <= {ceiling}. "
            "Set forceBigQuery=true to bypass this safety check."
        )


@dataclass(frozen=True)
class TrimmedPath:
    path: str
    original_length: int


@dataclass
class TrimResult:
    value: Any
    trimmed: list[TrimmedPath] = field(default_factory=lambda: list[TrimmedPath]())
    ceiling: int = ROW_CEILING

    @property
    def was_trimmed(self) -> bool:
        return bool(self.trimmed)

    @property
    def warning(self) -> str | None:
        """Human-readable summary of every truncation, or None."""
        if not self.trimmed:
            return None
        parts = ", ".join(
            f"{t.path} ({t.original_length} rows trimmed to {self.ceiling})" for t in self.trimmed
        )
        return (
            f"Result trimmed to {self.ceiling} rows per list: {parts}. "
            "Set forceBigQuery=true to return the full result."
        )


def trim_result(value: Any, force: bool = False, ceiling: int = ROW_CEILING) -> TrimResult:
    """Truncate every list longer than *ceiling* found anywhere in *value*.

    The input is never mutated; with *force* it is returned as-is.
    """
    if force:
        return TrimResult(value=value, ceiling=ceiling)
    trimmed: list[TrimmedPath] = []
    return TrimResult(value=_trim(value, "", ceiling, trimmed), trimmed=trimmed, ceiling=ceiling)


def _key_path(path: str, key: Any) -> str:
    """Append *key* to *path*: ``a.b`` for plain names, ``a["b.c"]`` otherwise."""
    key = str(key)
    if _PLAIN_KEY_RE.match(key):
        return f"{path}.{key}" if path else key
    return f"{path}[{json.dumps(key)}]"


def _trim(value: Any, path: str, ceiling: int, trimmed: list[TrimmedPath]) -> Any:
    if isinstance(value, dict):
        return {
            key: _trim(item, _key_path(path, key), ceiling, trimmed)
            for key, item in value.items()
        }
    if isinstance(value, list):
        if len(value) > ceiling:
            trimmed.append(TrimmedPath(path=path or "<root>", original_length=len(value)))
            value = value[:ceiling]
        return [_trim(item, f"{path}[{i}]", ceiling, trimmed) for i, item in enumerate(value)]
    return value


def annotate(payload: Any, result: TrimResult) -> Any:
    """Attach the trim warning to *payload* without touching existing keys.

    Dict payloads gain a top-level ``warning`` key (or ``_trimWarning`` when
    ``warning`` is already taken). Any other payload is wrapped as
    ``{"data": payload, "warning": ...}``.
    """
    warning = result.warning
    if warning is None:
        return payload
    if isinstance(payload, dict):
        key = "_trimWarning" if "warning" in payload else "warning"
        return {**payload, key: warning}
    return {"data": payload, "warning": warning}
