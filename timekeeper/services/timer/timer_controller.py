"""Timer Controller - Manages timer lifecycle"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from timekeeper.errors import InputError, TimerNotFoundError
from timekeeper.infra.state_store import TimerStateStore
from timekeeper.models.results import (
    CreateTimerResult,
    SequencePreview,
    TimerActionResult,
    TimerListResult,
    TimerView,
)
from timekeeper.models.preset import Preset
from timekeeper.models.sequence import Phase, SequenceSummary
from timekeeper.models.timer import Timer, TimerState
from timekeeper.services.presets.preset_resolver import PresetResolver
from timekeeper.services.scheduler.base import SchedulerAdapter
from timekeeper.services.sequence import (
    MAX_PHASES,
    count_phases,
    expand,
    format_clock,
    parse,
    parse_duration,
    summarize,
    tokenize,
)
from timekeeper.utils.datetime_helper import Clock, add_seconds, parse_iso, to_iso, utc_now
from .notifier import LogNotifier, Notifier, TimerEvent
from .progress import compute_progress, remaining_seconds, seconds_until_end

logger = logging.getLogger(__name__)

ALL_TIMERS = "all"
DONE_TIMERS = "done"
DEFAULT_MESSAGE = "Timer"

NOT_FOUND = "not_found"
INVALID_STATE = "invalid_state"


def _id_sort_key(timer: Timer) -> Tuple[int, str]:
    return (int(timer.id), "") if timer.id.isdigit() else (0, timer.id)


class TimerController:
    """
    Create, pause, resume, remove and reconcile timers.

    Every command is a whole-store read-modify-write: load all timers,
    change them in memory, save all of them back. Scheduler jobs are
    submitted after the new state is saved, and notifications go out last.
    """

    def __init__(
        self,
        store: TimerStateStore,
        scheduler: SchedulerAdapter,
        resolver: PresetResolver,
        clock: Clock = utc_now,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store
        self.scheduler = scheduler
        self.resolver = resolver
        self._clock = clock
        self._notifier = notifier or LogNotifier()

    # ------------------------------------------------------------------
    # Sequences
    # ------------------------------------------------------------------

    def build_sequence(self, pattern: str) -> Tuple[str, List[Phase], SequenceSummary]:
        """
        Resolve presets and expand a sequence pattern.

        Returns:
            (resolved pattern, phases, summary)

        Raises:
            InputError: If the pattern yields no phases, or more than MAX_PHASES
        """
        resolved = self.resolver.resolve(pattern)
        ast = parse(tokenize(resolved))
        phase_count = count_phases(ast)
        if phase_count > MAX_PHASES:
            raise InputError(f"'{pattern}' expands to {phase_count} phases, the limit is {MAX_PHASES}")
        phases = expand(ast)
        if not phases:
            raise InputError(f"No phases could be read from '{pattern}'")
        return resolved, phases, summarize(phases)

    def preview(self, pattern: str) -> SequencePreview:
        pattern = (pattern or "").strip()
        resolved, phases, summary = self.build_sequence(pattern)
        return SequencePreview(pattern=pattern, resolved_pattern=resolved, phases=phases, summary=summary)

    def list_presets(self) -> List[Preset]:
        return self.resolver.list_presets()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, pattern: str, message: str = "", repeat: int = 1) -> CreateTimerResult:
        """
        Create a simple or sequence timer, routing on the shape of `pattern`.

        Args:
            pattern: Duration ("25m"), sequence pattern or preset name
            message: Text shown when the timer ends
            repeat: How many times a simple timer runs (ignored for sequences)

        Returns:
            CreateTimerResult; success is False when the input was unusable
        """
        text = (pattern or "").strip()
        try:
            if self.resolver.is_sequence_like(text):
                timer, summary = self.create_sequence(text, message)
                return CreateTimerResult(
                    success=True,
                    message=(
                        f"Sequence timer {timer.id} started: {summary.phase_count} phases, "
                        f"{summary.total_duration_text} ({summary.description})"
                    ),
                    timer=timer,
                    summary=summary,
                )

            timer = self.create_simple(text, message, repeat)
            runs = f" x{timer.repeat_total}" if timer.repeat_total > 1 else ""
            return CreateTimerResult(
                success=True,
                message=f"Timer {timer.id} started: {timer.duration_text}{runs}",
                timer=timer,
            )
        except InputError as e:
            logger.warning(f"Rejected timer input '{text}': {e}")
            return CreateTimerResult(success=False, message=str(e))

    def create_simple(self, duration_text: str, message: str = "", repeat: int = 1) -> Timer:
        """
        Start a single-duration timer, optionally repeated.

        Raises:
            InputError: If the duration does not parse to a positive number of seconds
        """
        seconds = parse_duration(duration_text)
        if seconds <= 0:
            raise InputError(f"Invalid duration '{duration_text}'")

        repeat_total = max(1, repeat)
        timers = self.store.load()
        now = self._clock()

        timer = Timer(
            id=self.store.next_id(timers),
            duration_text=duration_text,
            seconds=seconds,
            message=message or DEFAULT_MESSAGE,
            start_time=to_iso(now),
            end_time=to_iso(add_seconds(now, seconds)),
            repeat_total=repeat_total,
            repeat_remaining=repeat_total - 1,
            current_run=1,
            state=TimerState.RUNNING,
            is_sequence=False,
        )
        timers.append(timer)
        self.store.save(timers)
        self._submit(timer, seconds)

        logger.info(f"Timer {timer.id} started: {seconds}s x{repeat_total}, ends at {timer.end_time}")
        return timer

    def create_sequence(self, pattern: str, message: str = "") -> Tuple[Timer, SequenceSummary]:
        """
        Start a multi-phase timer from a pattern or preset name.

        Raises:
            InputError: If the pattern yields no phases
        """
        _, phases, summary = self.build_sequence(pattern)
        first = phases[0]
        timers = self.store.load()
        now = self._clock()

        timer = Timer(
            id=self.store.next_id(timers),
            duration_text=first.original_duration_text,
            seconds=first.seconds,
            message=message or first.label,
            start_time=to_iso(now),
            end_time=to_iso(add_seconds(now, first.seconds)),
            repeat_total=1,
            repeat_remaining=0,
            current_run=1,
            state=TimerState.RUNNING,
            is_sequence=True,
            sequence_pattern=pattern,
            phases=phases,
            current_phase_index=0,
            total_phases=len(phases),
            current_phase_label=first.label,
            total_sequence_seconds=summary.total_seconds,
            message_from_label=not message,
        )
        timers.append(timer)
        self.store.save(timers)
        self._submit(timer, first.seconds)

        logger.info(
            f"Sequence timer {timer.id} started: {summary.phase_count} phases, "
            f"{summary.total_seconds}s total"
        )
        return timer, summary

    # ------------------------------------------------------------------
    # Scheduler callback
    # ------------------------------------------------------------------

    def handle_fire(self, timer_id: str) -> Optional[Timer]:
        """
        Advance a timer whose current segment has elapsed.

        Simple timers start their next run or complete. Sequence timers
        move to the next phase or complete after the last one. Callbacks
        for timers that are gone or not running are ignored.

        Returns:
            The updated timer, or None if the callback was stale
        """
        timers = self.store.load()
        timer = next((t for t in timers if t.id == timer_id), None)
        if timer is None:
            logger.warning(f"Fire for unknown timer {timer_id}, ignoring")
            return None
        if timer.state != TimerState.RUNNING:
            logger.warning(f"Fire for timer {timer_id} in state {timer.state.value}, ignoring")
            return None

        now = self._clock()
        event = self._advance(timer, now)
        self.store.save(timers)

        if event == TimerEvent.COMPLETED:
            self.scheduler.cancel(timer.id)
        else:
            self._submit(timer, timer.seconds)
        self._notify(timer, event)
        return timer

    def _advance(self, timer: Timer, now: datetime) -> TimerEvent:
        if timer.is_sequence:
            if timer.has_next_phase():
                previous_label = timer.current_phase_label
                timer.current_phase_index += 1
                phase = timer.phases[timer.current_phase_index]
                timer.seconds = phase.seconds
                timer.duration_text = phase.original_duration_text
                timer.current_phase_label = phase.label
                follows_label = timer.message_from_label
                if follows_label is None:
                    follows_label = timer.message == previous_label
                if follows_label:
                    timer.message = phase.label
                self._start_segment(timer, now, timer.seconds)
                logger.info(
                    f"Timer {timer.id} phase {timer.current_phase_index + 1}/{timer.total_phases}: "
                    f"{phase.label} {phase.seconds}s"
                )
                return TimerEvent.PHASE_STARTED

            timer.current_phase_index = timer.total_phases
            self._complete(timer)
            return TimerEvent.COMPLETED

        if timer.repeat_remaining > 0:
            timer.repeat_remaining -= 1
            timer.current_run += 1
            self._start_segment(timer, now, timer.seconds)
            logger.info(f"Timer {timer.id} run {timer.current_run}/{timer.repeat_total}")
            return TimerEvent.REPEAT_STARTED

        self._complete(timer)
        return TimerEvent.COMPLETED

    # ------------------------------------------------------------------
    # Pause / resume / remove
    # ------------------------------------------------------------------

    def pause(self, target: str) -> TimerActionResult:
        """Pause one running timer by id, or every running timer with "all"."""
        try:
            timers, selected = self._select(target)
        except TimerNotFoundError as e:
            return TimerActionResult(success=False, message=str(e), error=NOT_FOUND)

        now = self._clock()
        affected, skipped = [], []
        for timer in selected:
            if timer.state != TimerState.RUNNING:
                skipped.append(timer.id)
                continue
            self.scheduler.cancel(timer.id)
            timer.remaining_seconds = seconds_until_end(timer, now)
            timer.state = TimerState.PAUSED
            affected.append(timer.id)
            logger.info(f"Timer {timer.id} paused with {timer.remaining_seconds}s left")

        if affected:
            self.store.save(timers)
        return self._action_result("paused", target, affected, skipped)

    def resume(self, target: str) -> TimerActionResult:
        """Resume one paused or lost timer by id, or all of them with "all"."""
        try:
            timers, selected = self._select(target)
        except TimerNotFoundError as e:
            return TimerActionResult(success=False, message=str(e), error=NOT_FOUND)

        now = self._clock()
        affected, skipped = [], []
        to_submit: List[Tuple[Timer, int]] = []
        completed: List[Timer] = []

        for timer in selected:
            if timer.state not in (TimerState.PAUSED, TimerState.LOST):
                skipped.append(timer.id)
                continue

            remaining = timer.remaining_seconds or 0
            seconds_to_use = remaining if remaining > 0 else timer.seconds
            if seconds_to_use <= 0:
                if timer.is_sequence:
                    timer.current_phase_index = timer.total_phases
                self._complete(timer)
                completed.append(timer)
            else:
                self._start_segment(timer, now, seconds_to_use)
                to_submit.append((timer, seconds_to_use))
                logger.info(f"Timer {timer.id} resumed with {seconds_to_use}s left")
            affected.append(timer.id)

        if affected:
            self.store.save(timers)
        for timer, seconds in to_submit:
            self._submit(timer, seconds)
        for timer in completed:
            self._notify(timer, TimerEvent.COMPLETED)
        return self._action_result("resumed", target, affected, skipped)

    def remove(self, target: str) -> TimerActionResult:
        """Remove a timer by id, every timer with "all", or completed ones with "done"."""
        if target == DONE_TIMERS:
            timers = self.store.load()
            selected = [t for t in timers if t.state == TimerState.COMPLETED]
        else:
            try:
                timers, selected = self._select(target)
            except TimerNotFoundError as e:
                return TimerActionResult(success=False, message=str(e), error=NOT_FOUND)

        removed_ids = {timer.id for timer in selected}
        for timer_id in removed_ids:
            self.scheduler.cancel(timer_id)

        if removed_ids:
            self.store.save([t for t in timers if t.id not in removed_ids])
            logger.info(f"Removed timers {sorted(removed_ids)}")

        affected = [t.id for t in selected]
        return self._action_result("removed", target, affected, [])

    # ------------------------------------------------------------------
    # Reconcile
    # ------------------------------------------------------------------

    def reconcile(self) -> List[str]:
        """
        Mark running timers without a scheduler job as Lost.

        A timer is Lost when its job is gone and its end time has passed or
        cannot be read. Running timers whose end is still ahead are left
        alone.

        Returns:
            Ids of timers that became Lost
        """
        timers = self.store.load()
        now = self._clock()
        lost: List[str] = []

        for timer in timers:
            if timer.state != TimerState.RUNNING or self.scheduler.exists(timer.id):
                continue
            end = parse_iso(timer.end_time)
            if end is None or end <= now:
                timer.state = TimerState.LOST
                timer.remaining_seconds = seconds_until_end(timer, now)
                lost.append(timer.id)

        if lost:
            self.store.save(timers)
            logger.warning(f"Timers {lost} have no scheduled job and are past their end time, marked Lost")
        return lost

    def rearm(self) -> List[str]:
        """
        Resubmit jobs for running timers whose end is still ahead but which
        have no job, e.g. after the daemon restarted.

        Returns:
            Ids of rearmed timers
        """
        now = self._clock()
        rearmed: List[str] = []
        for timer in self.store.load():
            if timer.state != TimerState.RUNNING or self.scheduler.exists(timer.id):
                continue
            left = seconds_until_end(timer, now)
            if left > 0:
                self._submit(timer, left)
                rearmed.append(timer.id)
        if rearmed:
            logger.info(f"Rearmed timers {rearmed}")
        return rearmed

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def view(self, timer: Timer, now: Optional[datetime] = None) -> TimerView:
        now = now or self._clock()
        left = remaining_seconds(timer, now)
        position = None
        if timer.is_sequence and timer.total_phases:
            index = min((timer.current_phase_index or 0) + 1, timer.total_phases)
            position = f"{index}/{timer.total_phases}"
        return TimerView(
            timer=timer,
            progress=compute_progress(timer, now),
            remaining_seconds=left,
            remaining_text=format_clock(left),
            phase_position=position,
        )

    def list_timers(self, include_all: bool = False) -> TimerListResult:
        """List timers after reconciling; completed ones only with include_all."""
        self.reconcile()
        now = self._clock()
        timers = sorted(self.store.load(), key=_id_sort_key)
        if not include_all:
            timers = [t for t in timers if t.state != TimerState.COMPLETED]
        views = [self.view(t, now) for t in timers]
        return TimerListResult(timers=views, count=len(views))

    def get_timer(self, timer_id: str) -> TimerView:
        """Raises TimerNotFoundError for unknown ids."""
        self.reconcile()
        return self.view(self._require(timer_id))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _select(self, target: str) -> Tuple[List[Timer], List[Timer]]:
        timers = self.store.load()
        if target == ALL_TIMERS:
            return timers, list(timers)
        selected = [t for t in timers if t.id == target]
        if not selected:
            raise TimerNotFoundError(target)
        return timers, selected

    def _require(self, timer_id: str) -> Timer:
        timer = self.store.get(timer_id)
        if timer is None:
            raise TimerNotFoundError(timer_id)
        return timer

    def _start_segment(self, timer: Timer, now: datetime, seconds: int) -> None:
        timer.start_time = to_iso(now)
        timer.end_time = to_iso(add_seconds(now, seconds))
        timer.remaining_seconds = None
        timer.state = TimerState.RUNNING

    def _complete(self, timer: Timer) -> None:
        timer.state = TimerState.COMPLETED
        timer.remaining_seconds = None
        logger.info(f"Timer {timer.id} completed")

    def _submit(self, timer: Timer, seconds: int) -> None:
        try:
            self.scheduler.submit(timer.id, seconds, self.handle_fire)
        except Exception as e:
            # the timer stays Running without a job; reconcile will report it Lost
            logger.error(f"Could not schedule timer {timer.id}: {e}")

    def _notify(self, timer: Timer, event: TimerEvent) -> None:
        try:
            self._notifier.notify(timer, event)
        except Exception as e:
            logger.error(f"Notification for timer {timer.id} failed: {e}")

    def _action_result(
        self, verb: str, target: str, affected: List[str], skipped: List[str]
    ) -> TimerActionResult:
        error = None
        if affected:
            message = f"{verb.capitalize()} {len(affected)} timer(s): {', '.join(affected)}"
        elif target in (ALL_TIMERS, DONE_TIMERS):
            message = f"No timers {verb}"
        else:
            message = f"Timer {target} could not be {verb} in its current state"
            error = INVALID_STATE
        return TimerActionResult(
            success=error is None,
            message=message,
            affected_ids=affected,
            skipped_ids=skipped,
            error=error,
        )


