"""
Session scheduler: drives the game rules on a timer.

One GameLoop owns one session at a time: the current GameState snapshot,
a single pending timer and the session start time. Ticks, direction
changes, pause/resume and restart all serialize on one lock. Every armed
timer carries the generation it was scheduled under; bumping the
generation is how a pending tick is invalidated, so a timer that fires
after a restart or stop does nothing.
"""

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from config import GameSettings
from data_access.ledger import ScoreLedger
from domain import rules
from domain.constants import Direction, PAUSED_POLL_MS
from domain.errors import InvalidTransitionError, StorageFailure
from domain.game_state import GameState
from domain.score import ScoreRecord
from domain.speed import next_interval_ms
from services.input_gate import InputGate, min_interval_for_sensitivity

logger = logging.getLogger(__name__)

TickListener = Callable[[GameState], None]


@dataclass(frozen=True)
class SessionResult:
    """Outcome of a finished (or abandoned) session."""

    score: int
    snake_length: int
    tier_label: str
    player_name: str
    duration_ms: int
    won: bool = False
    death_reason: Optional[str] = None
    record: Optional[ScoreRecord] = None
    persisted: bool = False
    error: Optional[str] = None


SessionEndedListener = Callable[[SessionResult], None]


def _thread_timer(delay_ms: int, callback: Callable[[], None]):
    timer = threading.Timer(delay_ms / 1000.0, callback)
    timer.daemon = True
    return timer


def _wall_clock_ms() -> int:
    return int(time.monotonic() * 1000)


class GameLoop:
    """
    Fixed-tick scheduler for a single-player session.

    Args:
        ledger: where finished sessions with a positive score are recorded
        settings: board size, speed tier, sensitivity and player name
        timer_factory: callable(delay_ms, callback) returning an object with
            start() and cancel(); defaults to a daemon threading.Timer
        clock_ms: monotonic millisecond clock used for durations and debounce
        rng: random source handed to the rules for food placement
    """

    def __init__(
        self,
        ledger: ScoreLedger,
        settings: Optional[GameSettings] = None,
        timer_factory=None,
        clock_ms: Optional[Callable[[], int]] = None,
        rng=None
    ):
        self.ledger = ledger
        self.settings = settings or GameSettings()
        self._timer_factory = timer_factory or _thread_timer
        self._clock_ms = clock_ms or _wall_clock_ms
        self._rng = rng

        self._lock = threading.RLock()
        self._notify_lock = threading.RLock()
        self._state: Optional[GameState] = None
        self._version = 0
        self._delivered_version = 0
        self._timer = None
        self._generation = 0
        self._started_at_ms = 0
        self._recorded = False
        self._last_result: Optional[SessionResult] = None

        self._gate = InputGate()
        self._min_input_interval_ms = min_interval_for_sensitivity(self.settings.control_sensitivity)

        self._tick_listeners: List[TickListener] = []
        self._ended_listeners: List[SessionEndedListener] = []

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def state(self) -> Optional[GameState]:
        return self._state

    @property
    def last_result(self) -> Optional[SessionResult]:
        return self._last_result

    @property
    def has_pending_tick(self) -> bool:
        with self._lock:
            return self._timer is not None

    def add_tick_listener(self, listener: TickListener) -> None:
        self._tick_listeners.append(listener)

    def add_session_ended_listener(self, listener: SessionEndedListener) -> None:
        self._ended_listeners.append(listener)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, width: Optional[int] = None, height: Optional[int] = None) -> GameState:
        """
        Begin a new session, discarding any current one without recording it.

        A board with no room for food ends the session immediately: no tick
        is armed and the session-ended listeners fire before this returns.

        Raises:
            ValueError: If an explicit width or height is not positive
        """
        if width is None:
            width = self.settings.board_width
        if height is None:
            height = self.settings.board_height
        if width < 1 or height < 1:
            raise ValueError(f"Board dimensions must be positive, got {width}x{height}")

        result = None
        with self._lock:
            self._cancel_timer()
            self._set_state(rules.initialize(width, height, self._rng))
            self._started_at_ms = self._clock_ms()
            self._recorded = False
            self._gate.reset()
            state = self._state
            if state.terminal:
                result = self._claim_result(state)
            else:
                self._schedule(next_interval_ms(self.settings.speed_tier, 0))
            version = self._version

        logger.info(
            "Started %sx%s session on %s tier",
            width, height, self.settings.speed_tier.label
        )
        self._notify_tick(state, version)
        if result is not None:
            self._complete(result)
        return state

    def restart(self, width: Optional[int] = None, height: Optional[int] = None) -> GameState:
        """
        Cancel the pending tick, record the outgoing session if it scored and
        was not already recorded, then start a fresh one.

        Raises:
            InvalidTransitionError: If no session was ever started
        """
        with self._lock:
            if self._state is None:
                raise InvalidTransitionError("Cannot restart a session that was never started")
            self._cancel_timer()
            result = self._claim_result(self._state)

        if result is not None:
            self._complete(result)
        return self.start(width, height)

    def stop(self) -> None:
        """Cancel any pending tick. Calling it again is a no-op."""
        with self._lock:
            if self._timer is None:
                return
            self._cancel_timer()
        logger.debug("Game loop stopped")

    def pause(self) -> Optional[GameState]:
        with self._lock:
            state = self._state
            if state is None or state.terminal or state.paused:
                return state
            self._set_state(state.with_paused(True))
            state, version = self._state, self._version
        self._notify_tick(state, version)
        return state

    def resume(self) -> Optional[GameState]:
        with self._lock:
            state = self._state
            if state is None or state.terminal or not state.paused:
                return state
            self._set_state(state.with_paused(False))
            if self._timer is None:
                self._schedule(next_interval_ms(self.settings.speed_tier, self._state.score))
            state, version = self._state, self._version
        self._notify_tick(state, version)
        return state

    def toggle_pause(self) -> Optional[GameState]:
        state = self._state
        if state is not None and state.paused:
            return self.resume()
        return self.pause()

    # -------------------------------------------------------------------------
    # Input and ticks
    # -------------------------------------------------------------------------

    def change_direction(self, requested: Direction, now_ms: Optional[int] = None) -> bool:
        """
        Debounce the request, then apply it to the current snapshot.

        Returns:
            True if the snake's direction changed
        """
        with self._lock:
            if self._state is None:
                return False
            now = self._clock_ms() if now_ms is None else now_ms
            if self._gate.accept(requested, now, self._min_input_interval_ms) is None:
                return False
            updated = rules.change_direction(self._state, requested)
            if updated is self._state:
                return False
            self._set_state(updated)
        return True

    def step(self) -> GameState:
        """
        Advance the current session by one tick right now, independent of
        the timer.

        Raises:
            InvalidTransitionError: If no session is running or it already ended
        """
        with self._lock:
            if self._state is None:
                raise InvalidTransitionError("Cannot advance a session that was never started")
            if self._state.terminal:
                raise InvalidTransitionError("Cannot advance a session that has already ended")
            state, result = self._advance_locked()
            if state.terminal:
                self._cancel_timer()
            version = self._version

        self._notify_tick(state, version)
        if result is not None:
            self._complete(result)
        return state

    def _on_tick(self, generation: int) -> None:
        result = None
        with self._lock:
            if generation != self._generation or self._state is None:
                return
            self._timer = None

            if self._state.terminal:
                return
            if self._state.paused:
                self._schedule(PAUSED_POLL_MS)
                return

            state, result = self._advance_locked()
            if state.terminal:
                self._generation += 1
            else:
                self._schedule(next_interval_ms(self.settings.speed_tier, state.score))
            version = self._version

        self._notify_tick(state, version)
        if result is not None:
            self._complete(result)

    def _advance_locked(self) -> Tuple[GameState, Optional[SessionResult]]:
        state = rules.advance(self._state, self._rng)
        self._set_state(state)
        if state.terminal:
            logger.info(
                "Session over: score=%s length=%s reason=%s",
                state.score, state.snake_length, state.death_reason
            )
            return state, self._claim_result(state)
        return state, None

    # -------------------------------------------------------------------------
    # Timer plumbing
    # -------------------------------------------------------------------------

    def _schedule(self, delay_ms: int) -> None:
        generation = self._generation
        timer = self._timer_factory(delay_ms, lambda: self._on_tick(generation))
        self._timer = timer
        timer.start()

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # -------------------------------------------------------------------------
    # Session results
    # -------------------------------------------------------------------------

    def _claim_result(self, state: GameState) -> Optional[SessionResult]:
        """Build the result for state once per session; later calls return None."""
        if self._recorded:
            return None
        self._recorded = True
        return SessionResult(
            score=state.score,
            snake_length=state.snake_length,
            tier_label=self.settings.speed_tier.label,
            player_name=self.settings.player_name,
            duration_ms=max(0, self._clock_ms() - self._started_at_ms),
            won=state.won,
            death_reason=state.death_reason,
        )

    def save_result(self, result: SessionResult) -> SessionResult:
        """
        Write a result to the ledger. Zero scores are not recorded.

        A StorageFailure is logged and reported on the returned result
        rather than raised, so the final score is never lost.
        """
        if result.score <= 0 or result.persisted:
            return result
        try:
            record = self.ledger.insert(
                result.score,
                result.player_name,
                result.snake_length,
                result.tier_label,
                result.duration_ms,
            )
        except StorageFailure as e:
            logger.warning("Could not save score %s: %s", result.score, e)
            return replace(result, error=str(e))
        return replace(result, record=record, persisted=True, error=None)

    def _complete(self, result: SessionResult) -> None:
        result = self.save_result(result)
        self._last_result = result
        for listener in list(self._ended_listeners):
            try:
                listener(result)
            except Exception:
                logger.exception("Session-ended listener failed")

    def _set_state(self, state: GameState) -> None:
        # Caller holds self._lock.
        self._state = state
        self._version += 1

    def _notify_tick(self, state: GameState, version: int) -> None:
        """
        Hand a snapshot to the tick listeners.

        Notifications run outside the state lock, so a tick on the timer
        thread and a pause on the caller's thread can race here. Listeners
        only ever see snapshots in the order they were produced; a snapshot
        older than one already delivered is dropped.
        """
        with self._notify_lock:
            if version <= self._delivered_version:
                return
            self._delivered_version = version
            for listener in list(self._tick_listeners):
                try:
                    listener(state)
                except Exception:
                    logger.exception("Tick listener failed")


class ManualTimer:
    """Timer that only fires when told to. Used by headless runs and tests."""

    def __init__(self, delay_ms: int, callback: Callable[[], None]):
        self.delay_ms = delay_ms
        self.callback = callback
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.callback()


class ManualTimerFactory:
    """timer_factory for GameLoop that keeps every timer it hands out."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, delay_ms: int, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay_ms, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> Optional[ManualTimer]:
        """The most recent timer that has neither fired nor been cancelled."""
        for timer in reversed(self.timers):
            if not timer.cancelled and not timer.fired:
                return timer
        return None

    def fire_pending(self) -> Optional[int]:
        """Fire the pending timer. Returns its delay, or None if nothing was pending."""
        timer = self.pending
        if timer is None:
            return None
        timer.fire()
        return timer.delay_ms
