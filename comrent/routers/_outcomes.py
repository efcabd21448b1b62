from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, status

from ..core.errors import NotFound, Rejected

T = TypeVar("T")


def unwrap(outcome: T | NotFound | Rejected, *, prefix: str | None = None) -> T:
    """Turn a domain outcome into its value or the matching HTTP error."""

    if isinstance(outcome, NotFound):
        raise HTTPException(status.HTTP_404_NOT_FOUND, outcome.message)
    if isinstance(outcome, Rejected):
        message = f"{prefix}: {outcome.message}" if prefix else outcome.message
        raise HTTPException(status.HTTP_400_BAD_REQUEST, message)
    return outcome
