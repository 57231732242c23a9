"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from jukebox_queue.domain.shared.types import NonEmptyStr, VoteTally

    class MyModel(BaseModel):
        name: NonEmptyStr
        votes: VoteTally
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

VoteTally = int
"""Net community votes for a project. May be negative after down-votes."""

DurationMs = Annotated[int, Field(ge=0, le=86_400_000)]
"""Track duration in milliseconds: 0 … 86 400 000 (24 hours)."""

PortInt = Annotated[int, Field(gt=0, le=65_535)]
"""TCP port number."""

TimeoutSeconds = Annotated[float, Field(gt=0.0, le=120.0)]
"""HTTP timeout in seconds."""

PlaylistLimit = Annotated[int, Field(ge=1, le=50)]
"""Page size accepted by the catalog playlist listing."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

TrackTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Track title: 1-500 characters."""

ProjectNameStr = Annotated[str, Field(min_length=1, max_length=200, pattern=r"\S")]
"""Project name, also used verbatim as the queue topic. Must not be blank."""

CatalogUriStr = Annotated[str, Field(min_length=1, pattern=r"^[a-z]+:")]
"""Catalog URI such as ``spotify:track:4uLU6hMCjMI75M1A2tKUQC``."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""
