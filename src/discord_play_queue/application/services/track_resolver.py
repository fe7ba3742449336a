"""Track Resolver - one search backend call turned into requester-stamped tracks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ...domain.music.entities import Track
from ...domain.music.value_objects import LoadOutcome
from ...domain.shared.exceptions import BackendResponseError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .search_models import BackendTrackEntry, ResolutionResult, SearchResponse

if TYPE_CHECKING:
    from ...domain.music.value_objects import Requester
    from ..interfaces.search_backend import AudioSearchBackend

logger = logging.getLogger(__name__)

LOG_QUERY_TRUNCATE = 80


class TrackResolver:
    """Validates backend payloads and normalizes them into domain tracks.

    A payload without an array-typed track list, or with a ``loadType`` the
    backend is not known to send, comes back as ``MALFORMED_RESPONSE`` carrying
    a ``BackendResponseError``. No-match and load-failed come back empty.
    The resolver never enqueues anything.
    """

    def __init__(self, *, search_backend: AudioSearchBackend) -> None:
        self._backend = search_backend

    async def resolve(self, query: str, requester: Requester) -> ResolutionResult:
        payload = await self._backend.search(query)

        try:
            response = SearchResponse.model_validate(payload)
        except ValidationError as e:
            return self._malformed(query, ErrorMessages.MALFORMED_BACKEND_RESPONSE, e)

        try:
            outcome = LoadOutcome.from_load_type(response.load_type)
        except ValueError as e:
            return self._malformed(query, str(e), e, load_type=response.load_type)

        if outcome.is_empty:
            logger.debug(LogTemplates.RESOLVE_EMPTY, outcome.value, query[:LOG_QUERY_TRUNCATE])
            return ResolutionResult(outcome=outcome)

        tracks = tuple(
            track.with_requester(requester)
            for track in self._normalize_entries(response.tracks)
        )
        logger.debug(
            LogTemplates.RESOLVE_COMPLETED, len(tracks), outcome.value, query[:LOG_QUERY_TRUNCATE]
        )
        return ResolutionResult(outcome=outcome, tracks=tracks)

    @staticmethod
    def _normalize_entries(entries: list[object]) -> list[Track]:
        tracks: list[Track] = []
        for index, raw in enumerate(entries):
            try:
                track = BackendTrackEntry.from_raw(raw).to_track()
            except (TypeError, ValidationError) as e:
                logger.warning(LogTemplates.RESOLVE_ENTRY_SKIPPED, index, e)
                continue

            if track is None:
                logger.warning(LogTemplates.RESOLVE_ENTRY_NO_URI, index)
                continue
            tracks.append(track)
        return tracks

    @staticmethod
    def _malformed(
        query: str, message: str, cause: Exception, load_type: object | None = None
    ) -> ResolutionResult:
        error = BackendResponseError(message, load_type=load_type)
        error.__cause__ = cause
        logger.warning(LogTemplates.RESOLVE_MALFORMED, query[:LOG_QUERY_TRUNCATE], cause)
        return ResolutionResult.malformed(error)
