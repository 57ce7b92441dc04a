"""
Process-wide session state.

SessionStore owns an immutable Session snapshot. Readers get the current
snapshot and may subscribe to changes; only the auth façade replaces it,
in a single reference swap, so no reader ever sees a half-updated session.
"""
import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict

from lokalfinds.api.v1.schemas.auth import AuthUser, UserProfile
from lokalfinds.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    SIGNED_OUT = "signed_out"
    SIGNING_IN = "signing_in"
    SIGNED_IN = "signed_in"
    GUEST = "guest"
    SIGNING_UP = "signing_up"


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: SessionStatus = SessionStatus.SIGNED_OUT
    user: Optional[AuthUser] = None
    profile: Optional[UserProfile] = None

    @property
    def is_guest(self) -> bool:
        return self.status == SessionStatus.GUEST

    @property
    def is_signed_in(self) -> bool:
        return self.status == SessionStatus.SIGNED_IN

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    @property
    def display_name(self) -> str:
        """
        Name shown on reviews: profile name, then email, then the anonymous label.
        """
        if self.profile and self.profile.first_name and self.profile.last_name:
            return self.profile.display_name
        if self.user and self.user.email:
            return self.user.email
        return "Anonymous User"


SessionListener = Callable[[Session], None]


def require_member(session: Session, message: str) -> None:
    """
    Raise ValidationError unless the session belongs to a registered, signed-in user.

    Guest sessions may read public data but every members-only write goes
    through this check first.
    """
    if not session.is_signed_in:
        raise ValidationError(message, field="session")


class SessionStore:
    """Holds the current Session and notifies subscribers when it changes"""

    def __init__(self, initial: Optional[Session] = None):
        self._session = initial or Session()
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with each new Session.

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, **changes) -> Session:
        """Swap in a new snapshot with `changes` applied. Reserved for the auth façade."""
        with self._lock:
            new_session = self._session.model_copy(update=changes)
            self._session = new_session
            listeners = list(self._listeners)

        logger.debug(f"Session -> {new_session.status.value} (user {new_session.user_id})")
        for listener in listeners:
            try:
                listener(new_session)
            except Exception as e:
                # A failing subscriber must not block the others
                logger.error(f"Session listener failed: {type(e).__name__}: {e}", exc_info=True)
        return new_session

    def _reset(self) -> Session:
        return self._replace(status=SessionStatus.SIGNED_OUT, user=None, profile=None)
