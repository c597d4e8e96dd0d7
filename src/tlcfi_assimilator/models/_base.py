"""Base model and shared field types.

Every model inherits from :class:`AssimilatorModel`, which makes
instances immutable and rejects unknown fields so that malformed
internal construction fails loudly instead of silently dropping data.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from tlcfi_assimilator._constants import MAX_TICK

Tick = Annotated[int, Field(ge=0, le=MAX_TICK, strict=True)]
"""Free-running TLC hardware counter in ``[0, 2**32 - 1]``."""

ElapsedMs = Annotated[int, Field(ge=0)]
"""Milliseconds since the first processed tick of a run."""


class AssimilatorModel(BaseModel):
    """Base for immutable tlcfi_assimilator data."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
