"""Events emitted by settled trades.

The executor emits TradeSettled and FeeCollected; venue adapters emit one
RouteTraded per executed leg. Events are buffered in an EventLog and
discarded when the trade that produced them aborts.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TypeVar

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class TradeSettled:
    """A trade completed and the trader received net_amount_out."""

    src_asset: str
    amount_in: int
    dest_asset: str
    net_amount_out: int
    trader: str


@dataclass(frozen=True)
class FeeCollected:
    """A partner fee was transferred.

    partner_index is the index actually billed, which is 0 when the
    caller supplied an unknown partner.
    """

    partner_index: int
    dest_asset: str
    wallet: str
    fee_amount: int


@dataclass(frozen=True)
class RouteTraded:
    """One venue executed one leg."""

    route: str
    src_asset: str
    amount_in: int
    dest_asset: str
    amount_out: int


Event = TradeSettled | FeeCollected | RouteTraded
E = TypeVar("E", TradeSettled, FeeCollected, RouteTraded)


class EventLog:
    """Ordered, append-only record of emitted events."""

    def __init__(self) -> None:
        self._events: list[Event] = []

    def emit(self, event: Event) -> None:
        self._events.append(event)
        logger.debug("event_emitted", event_type=type(event).__name__)

    def of_type(self, event_type: type[E]) -> list[E]:
        """Return all events of the given type, in emission order."""
        return [e for e in self._events if isinstance(e, event_type)]

    def clear(self) -> None:
        self._events.clear()

    @contextmanager
    def atomic(self) -> Iterator[EventLog]:
        """Drop events emitted inside the block if it raises."""
        mark = len(self._events)
        try:
            yield self
        except BaseException:
            dropped = len(self._events) - mark
            del self._events[mark:]
            if dropped:
                logger.debug("events_discarded", count=dropped)
            raise

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)


__all__ = ["EventLog", "Event", "TradeSettled", "FeeCollected", "RouteTraded"]
