import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional


class AdminSessionState(str, Enum):
    IDLE = "idle"
    BOUND = "bound"


class AdminSessionStore(ABC):
    """Admin id -> customer id the admin currently relays to.

    One binding per admin, last write wins. There is no unbind: a bound admin only
    changes target by connecting to another customer.
    """

    @abstractmethod
    def bind(self, admin_id: str, customer_id: str) -> None:
        ...

    @abstractmethod
    def get(self, admin_id: str) -> Optional[str]:
        ...

    def state(self, admin_id: str) -> AdminSessionState:
        return AdminSessionState.BOUND if self.get(admin_id) else AdminSessionState.IDLE


class InMemorySessionStore(AdminSessionStore):
    """Process-local store; everything resets to idle on restart.

    ``ttl_seconds`` is the expiry hook. ``None`` keeps bindings until overwritten.
    """

    def __init__(self, ttl_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._bindings: dict[str, tuple[str, float]] = {}

    def bind(self, admin_id: str, customer_id: str) -> None:
        self._bindings[str(admin_id)] = (str(customer_id), self._clock())

    def get(self, admin_id: str) -> Optional[str]:
        entry = self._bindings.get(str(admin_id))
        if entry is None:
            return None
        customer_id, bound_at = entry
        if self.ttl_seconds is not None and self._clock() - bound_at > self.ttl_seconds:
            return None
        return customer_id
