"""
Profile loading with a bounded retry schedule.

Right after signup the profile row may not be visible yet, so ``/me`` retries
the lookup after each delay in ``PROFILE_LOAD_DELAYS`` before giving up.

States: PENDING -> (RETRYING ->)* LOADED | FAILED | CANCELLED
"""
import enum
import logging
import threading
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from blueprintos.config import settings

logger = logging.getLogger("blueprintos.profile_loader")

T = TypeVar("T")


class LoadState(str, enum.Enum):
    PENDING = "pending"
    RETRYING = "retrying"
    LOADED = "loaded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = (LoadState.LOADED, LoadState.FAILED, LoadState.CANCELLED)


class ProfileLoader(Generic[T]):
    """Runs ``fetch`` until it returns a value or the delays run out.

    ``sleep(seconds)`` returns True when the wait was interrupted; the default
    waits on ``cancel_event`` so ``cancel()`` stops a pending retry at once.
    """

    def __init__(
        self,
        fetch: Callable[[], Optional[T]],
        delays: Optional[Sequence[float]] = None,
        sleep: Optional[Callable[[float], bool]] = None,
    ):
        self.fetch = fetch
        self.delays: List[float] = list(settings.PROFILE_LOAD_DELAYS if delays is None else delays)
        self.cancel_event = threading.Event()
        self._sleep = sleep or self.cancel_event.wait
        self.state = LoadState.PENDING
        self.attempts = 0
        self.result: Optional[T] = None

    @property
    def max_attempts(self) -> int:
        return len(self.delays) + 1

    def cancel(self) -> None:
        self.cancel_event.set()

    def _attempt(self) -> bool:
        self.attempts += 1
        self.result = self.fetch()
        return self.result is not None

    def run(self) -> LoadState:
        if self.state in TERMINAL_STATES:
            return self.state

        if self._attempt():
            self.state = LoadState.LOADED
            return self.state

        for delay in self.delays:
            if self.cancel_event.is_set():
                break
            self.state = LoadState.RETRYING
            logger.debug("Profile not found, retrying in %.1fs (attempt %d)", delay, self.attempts + 1)
            if self._sleep(delay):
                self.cancel_event.set()
            if self.cancel_event.is_set():
                break
            if self._attempt():
                self.state = LoadState.LOADED
                return self.state

        if self.cancel_event.is_set():
            self.state = LoadState.CANCELLED
        else:
            logger.warning("Profile still missing after %d attempts", self.attempts)
            self.state = LoadState.FAILED
        return self.state


def recovery_actions() -> List[str]:
    """Options offered to the user when the profile never showed up."""
    actions = ["retry", "reload", "contact_support"]
    if not settings.is_production:
        actions.append("force_create_profile")
    return actions
