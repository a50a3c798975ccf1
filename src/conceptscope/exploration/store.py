"""Holder of the current SessionState.

State changes are whole-value replacements applied synchronously on the event
loop, so readers always observe a fully formed SessionState.
"""

import logging
from typing import Callable

from conceptscope.models import SessionState

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]
Transition = Callable[[SessionState], SessionState]


class SessionStore:
    """Current session state plus change listeners."""

    def __init__(self, state: SessionState | None = None) -> None:
        self._state = state or SessionState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, transition: Transition) -> SessionState:
        """Apply ``transition`` to the current state.

        Listeners are only notified when the transition returns a new object.
        """
        new_state = transition(self._state)
        if new_state is self._state:
            return new_state

        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                logger.exception("Session listener failed")
        return new_state
