"""Event/clock system for PyZorkCore - timed interrupts and daemons.

Daemons run on every turn they are enabled. Interrupts count down once per
processed turn, fire once when the count reaches zero, and then stay
registered but inert until re-armed with ``queue_interrupt``.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from pyzorkcore.engine.state import GameState

logger = logging.getLogger(__name__)

# Returns True if the handler caused a change the player can see
EventHandler = Callable[["GameState"], bool]


@dataclass
class EventEntry:
    """A registered daemon or interrupt."""

    id: str
    handler: EventHandler
    ticks_remaining: int = 0
    enabled: bool = True
    is_daemon: bool = False
    fired: bool = False


@dataclass
class HandlerOutcome:
    """Result of running one handler during a turn."""

    event_id: str
    changed: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class EventStatus:
    """Snapshot of an entry for inspection."""

    enabled: bool
    ticks_remaining: int
    is_daemon: bool
    fired: bool = False


class EventScheduler:
    """Registry of daemons and interrupts, run once per player turn."""

    def __init__(self) -> None:
        self._events: dict[str, EventEntry] = {}
        self._clock_wait = False
        self.last_outcomes: list[HandlerOutcome] = []

    # ============ Registration ============

    def register_daemon(self, event_id: str, handler: EventHandler, enabled: bool = True) -> None:
        """Register a daemon that runs every enabled turn.

        Re-registering an id replaces its handler but keeps its place in
        the execution order.
        """
        self._events[event_id] = EventEntry(
            id=event_id,
            handler=handler,
            ticks_remaining=0,
            enabled=enabled,
            is_daemon=True,
        )
        logger.debug(f"Registered daemon {event_id} (enabled={enabled})")

    def register_interrupt(self, event_id: str, handler: EventHandler, ticks: int) -> None:
        """Register an interrupt that fires once after ``ticks`` turns."""
        self._events[event_id] = EventEntry(
            id=event_id,
            handler=handler,
            ticks_remaining=max(ticks, 0),
            enabled=True,
            is_daemon=False,
        )
        logger.debug(f"Registered interrupt {event_id} in {ticks} turns")

    def queue_interrupt(self, event_id: str, ticks: int) -> None:
        """Re-arm an existing interrupt to fire after ``ticks`` turns."""
        entry = self._events.get(event_id)
        if entry is None:
            logger.debug(f"queue_interrupt: no event {event_id}")
            return
        entry.ticks_remaining = max(ticks, 0)
        entry.enabled = True
        entry.fired = False

    def enable(self, event_id: str) -> None:
        """Resume a paused entry. A spent interrupt needs ``queue_interrupt``."""
        entry = self._events.get(event_id)
        if entry is None:
            return
        if not entry.is_daemon and entry.fired:
            logger.debug(f"enable: interrupt {event_id} already fired")
            return
        entry.enabled = True

    def disable(self, event_id: str) -> None:
        entry = self._events.get(event_id)
        if entry:
            entry.enabled = False

    def remove(self, event_id: str) -> None:
        self._events.pop(event_id, None)

    def clear(self) -> None:
        """Drop all events and the clock-wait flag."""
        self._events.clear()
        self._clock_wait = False
        self.last_outcomes = []

    # ============ Inspection ============

    def has_event(self, event_id: str) -> bool:
        return event_id in self._events

    def is_enabled(self, event_id: str) -> bool:
        entry = self._events.get(event_id)
        return entry is not None and entry.enabled

    def remaining_ticks(self, event_id: str) -> int:
        """Ticks left on an interrupt, or -1 if there is no such event."""
        entry = self._events.get(event_id)
        return entry.ticks_remaining if entry else -1

    def status(self, event_id: str) -> EventStatus | None:
        entry = self._events.get(event_id)
        if entry is None:
            return None
        return EventStatus(entry.enabled, entry.ticks_remaining, entry.is_daemon, entry.fired)

    def event_ids(self) -> list[str]:
        return list(self._events)

    # ============ Clock ============

    def set_clock_wait(self) -> None:
        """Skip every handler on the next processed turn."""
        self._clock_wait = True

    @property
    def clock_wait(self) -> bool:
        return self._clock_wait

    def process_turn(self, state: "GameState", player_has_won: bool = False) -> bool:
        """Run one turn of events. Called after each player command.

        Args:
            state: Game state handed to every handler.
            player_has_won: Wind-down mode; only interrupts run.

        Returns:
            True if any handler reported a visible change.
        """
        self.last_outcomes = []

        if self._clock_wait:
            self._clock_wait = False
            logger.debug("Clock wait set, skipping event pass")
            state.increment_moves()
            return False

        # Entries enabled when the pass starts; registration order
        pending = [
            entry for entry in self._events.values()
            if entry.enabled and not (player_has_won and entry.is_daemon)
        ]

        changed = False
        for entry in pending:
            if not entry.enabled:
                continue  # Disabled by an earlier handler this turn

            if entry.is_daemon:
                outcome = self._run(entry, state)
            else:
                if entry.ticks_remaining > 0:
                    entry.ticks_remaining -= 1
                if entry.ticks_remaining > 0:
                    continue
                # Inert after firing unless the handler re-arms it
                entry.enabled = False
                entry.fired = True
                outcome = self._run(entry, state)

            self.last_outcomes.append(outcome)
            if outcome.changed:
                changed = True

        state.increment_moves()
        return changed

    def _run(self, entry: EventEntry, state: "GameState") -> HandlerOutcome:
        """Run a handler, isolating failures from the rest of the turn."""
        kind = "daemon" if entry.is_daemon else "interrupt"
        try:
            return HandlerOutcome(entry.id, changed=bool(entry.handler(state)))
        except Exception as e:
            logger.error(f"Error in {kind} {entry.id}: {e}", exc_info=True)
            return HandlerOutcome(entry.id, changed=False, error=str(e) or type(e).__name__)
