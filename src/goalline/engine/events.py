"""Ledger events, the sink they go to, and the clock that stamps them.

The ledger reports three kinds of event to an injected sink and never
reads them back:

    team_created      (owner, team_id, player_ids, timestamp)
    result_announced  (player_goals, player_assists, timestamp)
    reward_claimed    (owner, team_id, amount, timestamp)

Usage:
    from goalline.engine.events import InMemoryEventSink, parse_event

    sink = InMemoryEventSink()
    ledger = Ledger(sink=sink)
    ...
    sink.events_of("team_created")
"""

from __future__ import annotations

import time
from typing import Annotated, Callable, Dict, List, Literal, Optional, Protocol, Union

from pydantic import BaseModel, Field, TypeAdapter


class TeamCreatedEvent(BaseModel):
    """A team was registered."""

    kind: Literal["team_created"] = "team_created"
    owner: str
    team_id: int = Field(ge=0)
    player_ids: List[int]
    timestamp: int


class ResultAnnouncedEvent(BaseModel):
    """The admin announced goals/assists and ranks were finalized."""

    kind: Literal["result_announced"] = "result_announced"
    player_goals: List[int]
    player_assists: List[int]
    timestamp: int


class RewardClaimedEvent(BaseModel):
    """A reward was paid out."""

    kind: Literal["reward_claimed"] = "reward_claimed"
    owner: str
    team_id: int = Field(ge=0)
    amount: int = Field(gt=0)
    timestamp: int


LedgerEvent = Union[TeamCreatedEvent, ResultAnnouncedEvent, RewardClaimedEvent]

_EVENT_ADAPTER: TypeAdapter = TypeAdapter(
    Annotated[LedgerEvent, Field(discriminator="kind")]
)


def parse_event(payload: Union[str, bytes, Dict]) -> LedgerEvent:
    """Rebuild a typed event from JSON or a dict."""
    if isinstance(payload, dict):
        return _EVENT_ADAPTER.validate_python(payload)
    return _EVENT_ADAPTER.validate_json(payload)


class EventSink(Protocol):
    def notify(self, event: LedgerEvent) -> None:
        ...


class InMemoryEventSink:
    """Keeps events in emission order."""

    def __init__(self) -> None:
        self.events: List[LedgerEvent] = []

    def notify(self, event: LedgerEvent) -> None:
        self.events.append(event)

    def events_of(self, kind: str) -> List[LedgerEvent]:
        return [e for e in self.events if e.kind == kind]

    def clear(self) -> None:
        self.events.clear()


class MonotonicClock:
    """Integer-second wall clock that never runs backwards."""

    def __init__(self, source: Optional[Callable[[], float]] = None, floor: int = 0):
        self._source = source or time.time
        self._last = floor

    def __call__(self) -> int:
        now = max(int(self._source()), self._last)
        self._last = now
        return now


__all__ = [
    "TeamCreatedEvent",
    "ResultAnnouncedEvent",
    "RewardClaimedEvent",
    "LedgerEvent",
    "parse_event",
    "EventSink",
    "InMemoryEventSink",
    "MonotonicClock",
]
