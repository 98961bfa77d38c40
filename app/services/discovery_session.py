import asyncio
import enum
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import HTTPException

from app import schemas

logger = logging.getLogger(__name__)

LIKE_FAILED_MESSAGE = "Failed to like user. Please try again."

FetchCandidates = Callable[[], Awaitable[List[schemas.ProfileProjection]]]
LikeCandidate = Callable[[uuid.UUID], Awaitable[schemas.LikeResult]]


class DiscoveryState(str, enum.Enum):
    LOADING = "loading"
    BROWSING = "browsing"
    EXHAUSTED = "exhausted"


class DiscoverySession:
    """A swipe deck for one viewer.

    Candidates are loaded once and stepped through by index. Like and pass
    both advance; a mutual like also raises the match notification, which
    stays up until it is closed or a chat is started.
    """

    def __init__(self):
        self.candidates: List[schemas.ProfileProjection] = []
        self.index = 0
        self.loading = True
        self.error: Optional[str] = None
        self.matched_user: Optional[schemas.ProfileProjection] = None
        self.show_match_notification = False
        # Bumped whenever the deck moves other than by a finished like
        self._moves = 0
        self._like_lock = asyncio.Lock()

    @property
    def state(self) -> DiscoveryState:
        if self.loading:
            return DiscoveryState.LOADING
        if self.index >= len(self.candidates):
            return DiscoveryState.EXHAUSTED
        return DiscoveryState.BROWSING

    @property
    def current(self) -> Optional[schemas.ProfileProjection]:
        if self.state != DiscoveryState.BROWSING:
            return None
        return self.candidates[self.index]

    async def load(self, fetch: FetchCandidates) -> None:
        self.loading = True
        self.index = 0
        self._moves += 1
        try:
            self.candidates = list(await fetch())
        except Exception as e:
            # Load failures are not shown to the viewer; the deck is just empty
            logger.error(f"Failed to load discovery candidates: {e}", exc_info=True)
            self.candidates = []
        finally:
            self.loading = False

    async def refresh(self, fetch: FetchCandidates) -> None:
        self.index = 0
        self.error = None
        await self.load(fetch)

    async def like(self, like: LikeCandidate) -> Optional[schemas.LikeResult]:
        # One like at a time; each acts on whatever is current when it gets the lock
        async with self._like_lock:
            candidate = self.current
            if candidate is None:
                return None
            moves = self._moves
            self.error = None
            try:
                result = await like(candidate.id)
            except HTTPException as e:
                logger.warning(f"Error liking user {candidate.id}: {e.detail}")
                self.error = str(e.detail) if e.detail else LIKE_FAILED_MESSAGE
                return None
            except Exception as e:
                logger.warning(f"Error liking user {candidate.id}: {e}")
                self.error = str(e) or LIKE_FAILED_MESSAGE
                return None

            if result.is_match:
                self.matched_user = result.matched_user
                self.show_match_notification = True
            # A pass or reload while the like was in flight already moved the deck
            if self._moves == moves:
                self.index += 1
            return result

    def pass_(self) -> None:
        if self.current is not None:
            self.index += 1
            self._moves += 1

    def close_match_notification(self) -> None:
        self.show_match_notification = False

    def start_chat(self) -> Optional[uuid.UUID]:
        """Dismiss the match notification and return who to chat with.

        Returns ``None`` once the notification has been closed.
        """
        if not self.show_match_notification or self.matched_user is None:
            return None
        self.show_match_notification = False
        return self.matched_user.id

    def snapshot(self) -> Dict[str, Any]:
        current = self.current
        return {
            "state": self.state.value,
            "index": self.index,
            "total": len(self.candidates),
            "current": current.model_dump(mode="json") if current else None,
            "error": self.error,
            "show_match_notification": self.show_match_notification,
            "matched_user": (
                self.matched_user.model_dump(mode="json")
                if self.show_match_notification and self.matched_user
                else None
            ),
        }
