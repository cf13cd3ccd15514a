"""Light source timers.

The brass lantern and the candles burn down in stages. Each stage is an
interrupt that shows a warning when it fires and re-arms itself for the
next stage; the last stage burns the light out. Progress lives in
``GameState.light_timers`` so a restart or a second game starts fresh.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pyzorkcore.engine.events import EventHandler
from pyzorkcore.engine.models import ObjectFlag, ObjectID
from pyzorkcore.engine.state import LightTimerState

if TYPE_CHECKING:
    from pyzorkcore.engine.state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LightStage:
    """Turns until the warning, and the warning itself."""

    ticks: int
    message: str


@dataclass(frozen=True)
class LightSource:
    object_id: str
    event_id: str
    stages: tuple[LightStage, ...]
    touch_when_lit: bool = False


LAMP_STAGES = (
    LightStage(100, "The lamp appears a bit dimmer."),
    LightStage(70, "The lamp is definitely dimmer now."),
    LightStage(15, "The lamp is nearly out."),
    LightStage(0, "You'd better have more light than from the brass lantern."),
)

CANDLE_STAGES = (
    LightStage(20, "The candles are getting quite short now."),
    LightStage(10, "The candles are becoming very short."),
    LightStage(0, "You'd better have more light than from the pair of candles."),
)

LAMP = LightSource(ObjectID.LAMP, "I-LANTERN", LAMP_STAGES)
CANDLES = LightSource(ObjectID.CANDLES, "I-CANDLES", CANDLE_STAGES, touch_when_lit=True)

LIGHT_SOURCES = {source.object_id: source for source in (LAMP, CANDLES)}


def light_source_for(object_id: str) -> LightSource | None:
    """Timer definition for an object, or None if it doesn't burn down."""
    return LIGHT_SOURCES.get(object_id)


def is_burned_out(state: "GameState", source: LightSource) -> bool:
    obj = state.get_object(source.object_id)
    if obj is not None and obj.has_flag(ObjectFlag.RMUNGBIT):
        return True
    timer = state.light_timers.get(source.object_id)
    return timer is not None and timer.stage_index >= len(source.stages)


def light_timer_handler(source: LightSource) -> EventHandler:
    """Build the interrupt handler for one light source."""

    def handler(state: "GameState") -> bool:
        obj = state.get_object(source.object_id)
        timer = state.light_timers.get(source.object_id)
        if obj is None or timer is None or not obj.is_on():
            return False
        if timer.stage_index >= len(source.stages):
            return False

        stage = source.stages[timer.stage_index]
        final = stage.ticks == 0
        if final:
            obj.remove_flag(ObjectFlag.ONBIT)
            obj.add_flag(ObjectFlag.RMUNGBIT)
            logger.debug(f"{source.object_id} burned out")

        shown = False
        if state.is_present(source.object_id):
            state.tell(stage.message)
            shown = True

        timer.stage_index += 1
        if timer.stage_index < len(source.stages) and state.events is not None:
            state.events.queue_interrupt(source.event_id, source.stages[timer.stage_index].ticks)

        return shown

    return handler


def start_light_timer(state: "GameState", source: LightSource) -> bool:
    """Start or resume a light source's countdown when it is lit.

    Returns False if the light is already burned out.
    """
    if is_burned_out(state, source):
        return False

    obj = state.get_object(source.object_id)
    if obj is not None and source.touch_when_lit:
        obj.add_flag(ObjectFlag.TOUCHBIT)

    events = state.events
    if events is None:
        return True

    if source.object_id in state.light_timers and events.has_event(source.event_id):
        status = events.status(source.event_id)
        if status.fired:
            # The stage came due while the light was off
            timer = state.light_timers[source.object_id]
            events.queue_interrupt(source.event_id, source.stages[timer.stage_index].ticks)
        else:
            # Relit; continue from the remaining count
            events.enable(source.event_id)
        return True

    state.light_timers[source.object_id] = LightTimerState(source.object_id)
    events.register_interrupt(
        source.event_id, light_timer_handler(source), source.stages[0].ticks
    )
    return True


def stop_light_timer(state: "GameState", source: LightSource) -> None:
    """Pause a countdown when the light is put out."""
    if state.events is not None:
        state.events.disable(source.event_id)


def reset_light_timers(state: "GameState") -> None:
    for source in LIGHT_SOURCES.values():
        state.light_timers.pop(source.object_id, None)
        if state.events is not None:
            state.events.remove(source.event_id)
