"""Pieces shared by the pydantic models behind site.yaml and chapters.json."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, ValidationError


def _as_tuple(value: Any) -> Any:
    # A bare string is shorthand for a one-element list.
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        return tuple(value)
    return value


StrTuple = Annotated[tuple[str, ...], BeforeValidator(_as_tuple)]


def describe(exc: ValidationError, where: str) -> str:
    """One line per problem, each prefixed with where it was found."""
    lines = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        lines.append(f"{where}: {loc}: {err['msg']}" if loc else f"{where}: {err['msg']}")
    return "; ".join(lines)
