# ABOUTME: Finite-state records for component load lifecycles and request tokens for stale-response checks.
# ABOUTME: Components replace their ViewState through explicit transitions rather than mutating flags.

import logging
from collections.abc import Hashable
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class IllegalTransitionError(RuntimeError):
    """A transition that the load lifecycle does not allow, e.g. READY without LOADING."""


class ViewState(BaseModel, Generic[T]):
    """Immutable load state of one component: IDLE, LOADING, READY(data) or ERROR(reason)."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: Status = Status.IDLE
    data: T | None = None
    error: str | None = None

    @classmethod
    def idle(cls) -> "ViewState[T]":
        return cls()

    def start(self) -> "ViewState[T]":
        """Enter LOADING. Allowed from any state; a new selection restarts the lifecycle."""
        return type(self)(status=Status.LOADING)

    def succeed(self, data: T) -> "ViewState[T]":
        if self.status is not Status.LOADING:
            raise IllegalTransitionError(f"cannot become ready from {self.status.value}")
        return type(self)(status=Status.READY, data=data)

    def fail(self, reason: str) -> "ViewState[T]":
        """Enter ERROR from IDLE (input rejected before loading) or LOADING."""
        if self.status not in (Status.IDLE, Status.LOADING):
            raise IllegalTransitionError(f"cannot fail from {self.status.value}")
        return type(self)(status=Status.ERROR, error=reason)

    @property
    def is_loading(self) -> bool:
        return self.status is Status.LOADING

    @property
    def is_ready(self) -> bool:
        return self.status is Status.READY

    @property
    def is_error(self) -> bool:
        return self.status is Status.ERROR


class RequestToken(BaseModel):
    """Tag attached to an in-flight request: the key it was issued for and its generation."""

    model_config = ConfigDict(frozen=True)

    key: Any
    generation: int


class RequestTracker:
    """Generation counter that tells whether a response still belongs to the current selection.

    Every call to issue() supersedes all earlier tokens, so a late response for an old
    key (or an older request for the same key) is recognised and discarded.
    """

    def __init__(self):
        self._generation = 0
        self._key: Hashable | None = None

    def issue(self, key: Hashable) -> RequestToken:
        self._generation += 1
        self._key = key
        return RequestToken(key=key, generation=self._generation)

    def is_current(self, token: RequestToken) -> bool:
        current = token.generation == self._generation and token.key == self._key
        if not current:
            logger.debug("Discarding stale response for %r (generation %d)", token.key, token.generation)
        return current

    @property
    def current_key(self) -> Hashable | None:
        return self._key
