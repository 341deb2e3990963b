import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Any, Tuple, Optional
from uuid import uuid4

from .domain import Event

logger = logging.getLogger(__name__)

STAY_CREATED = "STAY_CREATED"
CHARGE_ADDED = "CHARGE_ADDED"
CHECKED_OUT = "CHECKED_OUT"
ROOM_STATUS_CHANGED = "ROOM_STATUS_CHANGED"
POINTS_CREDITED = "POINTS_CREDITED"
POINTS_REDEEMED = "POINTS_REDEEMED"
CLEANING_REQUESTED = "CLEANING_REQUESTED"
CLIENT_ADDED = "CLIENT_ADDED"
EMPLOYEE_ADDED = "EMPLOYEE_ADDED"
ROOM_ADDED = "ROOM_ADDED"
SERVICE_REQUEST_ADDED = "SERVICE_REQUEST_ADDED"
SERVICE_REQUEST_COMPLETED = "SERVICE_REQUEST_COMPLETED"
MENU_ITEM_ADDED = "MENU_ITEM_ADDED"
LOYALTY_CONFIG_CHANGED = "LOYALTY_CONFIG_CHANGED"

# Wildcard subscription: receives every published event.
ANY = "*"


@dataclass(frozen=True)
class Subscription:
    id: str
    event_type: str
    callback: Callable[[Event], Any]
    filter_predicate: Optional[Callable[[Event], bool]] = None


class EventBus:
    """Synchronous event bus.

    Events are published after a command has committed. Subscribers run in
    publish order on the caller's thread; a failing subscriber is logged and
    skipped so it cannot undo a committed command.
    """

    def __init__(self, history_limit: int = 1000):
        self._subscribers: Dict[str, List[Subscription]] = {}
        self._event_history: List[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: str,
        callback: Callable[[Event], Any],
        filter_predicate: Optional[Callable[[Event], bool]] = None
    ) -> str:
        """Subscribe to an event type (or ``ANY``) with an optional filter."""
        sub_id = str(uuid4())
        subscription = Subscription(sub_id, event_type, callback, filter_predicate)
        self._subscribers.setdefault(event_type, []).append(subscription)
        return sub_id

    def unsubscribe(self, sub_id: str) -> bool:
        for subscribers in self._subscribers.values():
            for i, sub in enumerate(subscribers):
                if sub.id == sub_id:
                    subscribers.pop(i)
                    return True
        return False

    def publish(self, event: Event) -> None:
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            del self._event_history[:-self._history_limit]

        targets = self._subscribers.get(event.name, []) + self._subscribers.get(ANY, [])
        for subscriber in targets:
            try:
                if subscriber.filter_predicate and not subscriber.filter_predicate(event):
                    continue
                subscriber.callback(event)
            except Exception:
                logger.exception("Event subscriber %s failed on %s", subscriber.id, event.name)

    def emit(self, name: str, payload: Dict[str, Any]) -> Event:
        """Build an event and publish it."""
        event = Event(
            id=str(uuid4()),
            ts=datetime.now().isoformat(),
            name=name,
            payload=payload
        )
        self.publish(event)
        return event

    def get_event_history(self, limit: int = 100, event_type: str = None) -> Tuple[Event, ...]:
        events = self._event_history
        if event_type:
            events = [e for e in events if e.name == event_type]
        return tuple(events[-limit:]) if limit else ()

    def get_subscriber_count(self, event_type: str = None) -> int:
        if event_type:
            return len(self._subscribers.get(event_type, []))
        return sum(len(subs) for subs in self._subscribers.values())
