from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Optional, Tuple

from tubefeed.application.safe import SafeExecutor, default_executor
from tubefeed.crosscutting.logging import CorrelationContext, log_track_resolved
from tubefeed.domain.entities import PlayableMedia, Streamable, Track
from tubefeed.domain.ports import ExtractionGateway, StreamVariant


logger = logging.getLogger(__name__)


class ResolutionState(Enum):
    """Terminal outcome of one resolve call."""

    RESOLVED = "resolved"
    RESOLVED_EMPTY = "resolved_empty"
    UNCHANGED = "unchanged"


def to_streamable(variant: StreamVariant) -> Streamable:
    return Streamable(
        id=variant.url,
        quality=variant.format_label or "",
        format=variant.mime_type or "audio/*",
        bitrate=variant.average_bitrate,
        size=variant.content_length,
        headers={},
    )


def to_playable_media(streamable: Streamable) -> PlayableMedia:
    """Project a chosen streamable into what the player opens. No headers are injected."""
    return PlayableMedia(
        url=streamable.id,
        format=streamable.format,
        headers={},
        bitrate=streamable.bitrate,
        size=streamable.size,
    )


class StreamResolver:
    """Attaches the upstream stream candidates to a track.

    Candidates keep upstream order; choosing one is left to the player. On
    failure the input track comes back untouched.
    """

    def __init__(self, gateway: ExtractionGateway, executor: Optional[SafeExecutor] = None):
        self.gateway = gateway
        self.executor = executor or default_executor

    def resolve(self, track: Track) -> Track:
        return self.resolve_with_state(track)[0]

    def resolve_with_state(self, track: Track) -> Tuple[Track, ResolutionState]:
        with CorrelationContext(operation="loadTrack", track_id=track.id):
            logger.debug(f"Loading track: {track.title}")
            resolved = self.executor.run(
                "loadTrack",
                lambda: self._attach_streams(track),
                track,
            )
        if resolved is track:
            return track, ResolutionState.UNCHANGED
        if not resolved.streamables:
            return resolved, ResolutionState.RESOLVED_EMPTY
        return resolved, ResolutionState.RESOLVED

    def _attach_streams(self, track: Track) -> Track:
        variants = self.gateway.resolve_streams(track.id)
        streamables = [to_streamable(v) for v in variants]
        log_track_resolved(logger, track.id, len(streamables))
        return replace(track, streamables=streamables)
