"""Decides which resolution path a raw /play query takes."""

from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict

from ...domain.music.value_objects import (
    ExternalTrackReference,
    PlaylistReference,
    QueryKind,
)

# open.spotify.com/playlist/<id>, open.spotify.com/intl-de/playlist/<id>?si=...
# and the legacy open.spotify.com/user/<name>/playlist/<id>
SPOTIFY_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:https?://)?(?:open|play)\.spotify\.com/(?:intl-[a-z]{2}(?:-[a-z]{2})?/)?"
    r"(?:embed/)?(?:user/[^/?#\s]+/)?(?P<kind>playlist|track)/(?P<id>[A-Za-z0-9]+)",
    re.IGNORECASE,
)

# spotify:playlist:<id>, spotify:track:<id>, spotify:user:<name>:playlist:<id>
SPOTIFY_URI_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^spotify:(?:user:[^:\s]+:)?(?P<kind>playlist|track):(?P<id>[A-Za-z0-9]+)$",
    re.IGNORECASE,
)


class QueryClassification(BaseModel):
    """Resolution path plus the external reference it needs, if any."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: QueryKind
    query: str
    reference: PlaylistReference | ExternalTrackReference | None = None

    @property
    def is_external(self) -> bool:
        return self.kind is not QueryKind.GENERIC


def classify(raw_query: str) -> QueryClassification:
    """Classify *raw_query* by its shape alone; never raises and never touches the network."""
    query = raw_query.strip()

    match = SPOTIFY_URL_PATTERN.match(query) or SPOTIFY_URI_PATTERN.match(query)
    if match is None:
        return QueryClassification(kind=QueryKind.GENERIC, query=raw_query)

    kind = match.group("kind").lower()
    external_id = match.group("id")

    if kind == "playlist":
        return QueryClassification(
            kind=QueryKind.PLAYLIST,
            query=query,
            reference=PlaylistReference(external_id),
        )

    return QueryClassification(
        kind=QueryKind.SINGLE_EXTERNAL,
        query=query,
        reference=ExternalTrackReference(external_id),
    )
