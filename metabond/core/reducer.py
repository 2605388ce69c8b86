"""
Reducer: Pure state transition functions.

Ledger and deposit state are rebuilt by folding their event log through a
reducer. Handlers must be:
- Pure (no side effects, no I/O)
- Deterministic (same input -> same output)
"""

from typing import Any, Callable, Dict

from .events import Event
from .errors import InvalidTransitionError

# Handler signature: (current_state, event) -> new_state
Handler = Callable[[Any, Event], Any]


class Reducer:
    """
    Registry of event handlers for state transitions.

    Usage:
        reducer = Reducer(LedgerState.initial())
        reducer.register(CHECKPOINT_ADDED, on_checkpoint_added)
        new_state = reducer.apply(state, event)
    """

    def __init__(self, initial_state: Any) -> None:
        self.initial_state = initial_state
        self._handlers: Dict[str, Handler] = {}

    def register(self, event_type: str, handler: Handler) -> None:
        """
        Register event handler.

        Args:
            event_type: Event type string
            handler: Pure function (current_state, event) -> new_state
        """
        self._handlers[event_type] = handler

    def apply(self, state: Any, event: Event) -> Any:
        """
        Apply event to state using registered handler.

        Raises:
            InvalidTransitionError: If no handler registered for event type
        """
        if event.type not in self._handlers:
            raise InvalidTransitionError(f"No handler for event type: {event.type}")

        return self._handlers[event.type](state, event)
