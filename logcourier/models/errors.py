"""Structured error values that can be attached to a log call.

Three variants cover everything the error walker needs:

* ``LeafError`` — a single failure with no cause.
* ``WrappedError`` — a failure caused by another error.
* ``CompositeError`` — an aggregate of independent failures.

Native Python exceptions are accepted as well; see
``logcourier.core.error_chain``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class LeafError(BaseModel):
    """A failure with no underlying cause."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = "leaf"
    domain: str
    code: int = 0
    info: dict[str, Any] = {}
    description: str | None = None


class WrappedError(BaseModel):
    """A failure that was caused by another error."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["wrapped"] = "wrapped"
    domain: str
    code: int = 0
    info: dict[str, Any] = {}
    description: str | None = None
    cause: LogError


class CompositeError(BaseModel):
    """An aggregate of unrelated failures reported together."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["composite"] = "composite"
    domain: str = "CompositeError"
    code: int = 0
    info: dict[str, Any] = {}
    description: str | None = None
    parts: list[LogError] = []


LogError = Annotated[
    Union[LeafError, WrappedError, CompositeError],
    Field(discriminator="kind"),
]

WrappedError.model_rebuild()
CompositeError.model_rebuild()
