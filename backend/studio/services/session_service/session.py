"""Per-workflow studio state and the in-memory store that owns it."""

from __future__ import annotations

import uuid
from collections import OrderedDict
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Set

from studio.handlers.error_handler import ValidationError
from studio.models.image import DataUrl, ImagePayload
from studio.models.refine import RefinementResult
from studio.models.session import SessionView
from studio.services.history_service.edit_history import (
    ORIGINAL_IMAGE,
    EditHistoryController,
)
from studio.services.history_service.prompt_history import PromptHistoryController
from studio.utility.data_url import decode
from studio.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

MAX_SESSIONS = 100


class StudioSession:
    """State of one mounted studio workflow.

    Holds the uploaded images, both history controllers, the latest
    suggestions and refinements, and the set of actions currently in flight.
    """

    def __init__(self, session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.source_image: Optional[DataUrl] = None
        self.reference_image: Optional[DataUrl] = None
        self.source_version = 0
        self.edit_history = EditHistoryController()
        self.prompt_history = PromptHistoryController()
        self.suggestions: List[str] = []
        self.translation: Optional[RefinementResult] = None
        self.style_refinement: Optional[RefinementResult] = None
        self.generated_image: Optional[DataUrl] = None
        self._in_flight: Set[str] = set()

    def set_source_image(self, data_url: DataUrl) -> None:
        """Swap the product image; earlier edits and suggestions no longer apply."""
        decode(data_url)
        self.source_image = data_url
        self.source_version += 1
        self.edit_history.reset()
        self.suggestions = []
        logger.info(f"Session {self.session_id}: new source image, edit history reset")

    def set_reference_image(self, data_url: DataUrl) -> None:
        decode(data_url)
        self.reference_image = data_url

    def clear_reference_image(self) -> None:
        self.reference_image = None
        self.style_refinement = None

    def source_payload(self) -> Optional[ImagePayload]:
        return decode(self.source_image) if self.source_image else None

    def reference_payload(self) -> Optional[ImagePayload]:
        return decode(self.reference_image) if self.reference_image else None

    def display_image(self) -> Optional[DataUrl]:
        """The edit result on display, or None while viewing the original."""
        current = self.edit_history.current()
        return None if current == ORIGINAL_IMAGE else current

    def edit_base_image(self) -> Optional[DataUrl]:
        """Image the next edit starts from: the displayed result, else the source."""
        return self.display_image() or self.source_image

    def is_busy(self, action: str) -> bool:
        return action in self._in_flight

    @asynccontextmanager
    async def in_flight(self, action: str) -> AsyncIterator[None]:
        """Mark ``action`` pending for the duration of the block."""
        if action in self._in_flight:
            raise ValidationError(
                f"A {action} request is already in progress.",
                status_code=409,
                error_type="request_in_flight",
            )
        self._in_flight.add(action)
        try:
            yield
        finally:
            self._in_flight.discard(action)

    def snapshot(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            source_image=self.source_image,
            reference_image=self.reference_image,
            display_image=self.display_image(),
            edit_history=self.edit_history.snapshot(),
            prompt_history=self.prompt_history.snapshot(),
            suggestions=list(self.suggestions),
            translation=self.translation,
            style_refinement=self.style_refinement,
            generated_image=self.generated_image,
            in_flight=sorted(self._in_flight),
        )


class SessionStore:
    """In-memory sessions for the lifetime of the app; nothing is persisted.

    Holds at most ``max_sessions``. Creating one more evicts the least recently
    used session, preferring sessions with no request in flight.
    """

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self.max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, StudioSession] = OrderedDict()

    def _evict(self) -> None:
        while len(self._sessions) >= self.max_sessions:
            victim = next(
                (sid for sid, s in self._sessions.items() if not s._in_flight),
                next(iter(self._sessions)),
            )
            self._sessions.pop(victim)
            logger.info(f"Evicted least recently used session {victim}")

    def create(self) -> StudioSession:
        self._evict()
        session = StudioSession()
        self._sessions[session.session_id] = session
        logger.info(f"Created session {session.session_id}")
        return session

    def get(self, session_id: str) -> StudioSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise ValidationError(
                f"No session found with id {session_id}.",
                status_code=404,
                error_type="session_not_found",
            )
        self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> bool:
        """Drop a session; requests still in flight finish against the detached object."""
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
