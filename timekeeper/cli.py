"""Command-line interface for timers.

Commands are sent to the timer daemon (``timekeeper serve``) when it is
running. Otherwise they act on the state file directly; timers created that
way are not counted down and show up as Lost once their end time passes.
"""
import argparse
import logging
import os
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple, Union

import httpx

from timekeeper.config import Settings, get_settings
from timekeeper.errors import InputError
from timekeeper.infra.api_client import TimerApiClient
from timekeeper.models import SequencePreview, TimerActionResult, TimerListResult, TimerState, TimerView
from timekeeper.services.sequence import format_duration
from timekeeper.services.timer import NOT_APPLICABLE, TimerController, watch_timers
from timekeeper.services.timer.factory import build_controller
from timekeeper.utils.datetime_helper import format_local_time

logger = logging.getLogger(__name__)

Backend = Union[TimerController, TimerApiClient]

BAR_WIDTH = 20
CLEAR_SCREEN = "\033[2J\033[H"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def progress_bar(progress: int, width: int = BAR_WIDTH) -> str:
    if progress == NOT_APPLICABLE:
        return "[" + "?" * width + "]"
    filled = round(width * progress / 100)
    return "[" + "#" * filled + "." * (width - filled) + "]"


def format_view(view: TimerView) -> str:
    timer = view.timer
    label = timer.current_phase_label if timer.is_sequence else timer.message
    percent = "n/a" if view.progress == NOT_APPLICABLE else f"{view.progress:3d}%"
    parts = [
        f"{timer.id:>3}",
        f"{timer.state.value:<9}",
        f"{view.remaining_text:>8}",
        progress_bar(view.progress),
        percent,
        label or "",
    ]
    if view.phase_position:
        parts.append(f"(phase {view.phase_position})")
    elif timer.repeat_total > 1:
        parts.append(f"(run {timer.current_run}/{timer.repeat_total})")
    if timer.state == TimerState.RUNNING:
        parts.append(f"ends {format_local_time(timer.end_time)}")
    return "  ".join(parts)


def format_list(result: TimerListResult) -> str:
    if not result.timers:
        return "No timers."
    return "\n".join(format_view(view) for view in result.timers)


def format_preview(preview: SequencePreview) -> str:
    lines = []
    if preview.resolved_pattern != preview.pattern:
        lines.append(f"{preview.pattern} = {preview.resolved_pattern}")
    for index, phase in enumerate(preview.phases, start=1):
        loop = ""
        if phase.loop_id:
            loop = f"  [loop {phase.loop_id} {phase.loop_iteration}/{phase.loop_total}]"
        lines.append(f"{index:>3}. {phase.label:<12} {format_duration(phase.seconds):>10}{loop}")
    summary = preview.summary
    lines.append(f"{summary.phase_count} phases, {summary.total_duration_text} total: {summary.description}")
    return "\n".join(lines)


def _print_action(result: TimerActionResult) -> int:
    print(result.message)
    if result.skipped_ids:
        print(f"Skipped: {', '.join(result.skipped_ids)}")
    return 0 if result.success else 1


# ---------------------------------------------------------------------------
# Key press detection for watch mode
# ---------------------------------------------------------------------------

@contextmanager
def key_watcher() -> Iterator[Callable[[], bool]]:
    """Yields a function that returns True once a key has been pressed."""
    if not sys.stdin.isatty():
        yield lambda: False
        return

    if os.name == "nt":
        import msvcrt
        yield msvcrt.kbhit
        return

    import select
    import termios
    import tty

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)

    def pressed() -> bool:
        ready, _, _ = select.select([sys.stdin], [], [], 0)
        if ready:
            sys.stdin.read(1)
            return True
        return False

    try:
        tty.setcbreak(fd)
        yield pressed
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def _run_watch(backend: Backend, settings: Settings, timer_id: Optional[str], include_all: bool) -> int:
    clear = CLEAR_SCREEN if sys.stdout.isatty() else ""

    def render(frame: TimerListResult) -> None:
        sys.stdout.write(clear + format_list(frame) + "\n(press any key to stop)\n")
        sys.stdout.flush()

    with key_watcher() as should_stop:
        watch_timers(
            backend,
            on_frame=render,
            should_stop=should_stop,
            timer_id=timer_id,
            include_all=include_all,
            interval=settings.watch_interval,
        )
    return 0


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def open_backend(settings: Settings, local: bool = False) -> Backend:
    """Daemon client if the daemon answers, otherwise a local controller"""
    if not local:
        client = TimerApiClient(settings.api_url)
        if client.is_available():
            return client
        client.close()
        logger.info(f"Timer daemon not reachable at {settings.api_url}, using {settings.state_file}")
    return build_controller(settings)


def serve_address(settings: Settings, host: Optional[str] = None, port: Optional[int] = None) -> Tuple[str, int]:
    """Host and port for the daemon; missing values come from settings.api_url"""
    url = httpx.URL(settings.api_url)
    default_port = url.port or (443 if url.scheme == "https" else 80)
    return host or url.host or "127.0.0.1", port or default_port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="timekeeper", description="Countdown timers and Pomodoro sequences")
    parser.add_argument("--local", action="store_true", help="use the state file directly, skip the daemon")
    parser.add_argument("-v", "--verbose", action="store_true", help="log lifecycle events")
    sub = parser.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="start a timer, sequence or preset")
    start.add_argument("pattern", help='e.g. 25m, 1h30m, "(25m work, 5m rest)x4" or pomodoro')
    start.add_argument("-m", "--message", default="", help="message shown when the timer ends")
    start.add_argument("-r", "--repeat", type=int, default=1, help="repeat a simple timer N times")

    list_cmd = sub.add_parser("list", help="list timers")
    list_cmd.add_argument("-a", "--all", action="store_true", help="include completed timers")
    list_cmd.add_argument("-w", "--watch", action="store_true", help="refresh until a key is pressed")

    watch = sub.add_parser("watch", help="watch one timer or all timers")
    watch.add_argument("timer_id", nargs="?", help="timer id (default: all timers)")

    for name, help_text in (("pause", "pause a timer"), ("resume", "resume a timer")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("target", help='timer id or "all"')

    remove = sub.add_parser("remove", help="remove timers")
    remove.add_argument("target", help='timer id, "all" or "done"')

    sub.add_parser("presets", help="list presets")

    preview = sub.add_parser("preview", help="show the phases of a pattern without starting it")
    preview.add_argument("pattern")

    serve = sub.add_parser("serve", help="run the timer daemon")
    serve.add_argument("--host", help="default: host of TIMEKEEPER_API_URL")
    serve.add_argument("--port", type=int, help="default: port of TIMEKEEPER_API_URL")

    return parser


def run(args: argparse.Namespace, settings: Settings, backend: Backend) -> int:
    """Execute a parsed command against a backend and print the outcome"""
    if args.command == "start":
        result = backend.create(args.pattern, message=args.message, repeat=args.repeat)
        print(result.message)
        if result.success and isinstance(backend, TimerController):
            print("Timer daemon is not running; start it with 'timekeeper serve' to get alerts.", file=sys.stderr)
        return 0 if result.success else 1

    if args.command == "list":
        if args.watch:
            return _run_watch(backend, settings, None, args.all)
        print(format_list(backend.list_timers(include_all=args.all)))
        return 0

    if args.command == "watch":
        return _run_watch(backend, settings, args.timer_id, include_all=False)

    if args.command == "pause":
        return _print_action(backend.pause(args.target))

    if args.command == "resume":
        return _print_action(backend.resume(args.target))

    if args.command == "remove":
        return _print_action(backend.remove(args.target))

    if args.command == "presets":
        for preset in backend.list_presets():
            print(f"{preset.name:<15} {preset.pattern:<45} {preset.description}")
        return 0

    if args.command == "preview":
        try:
            print(format_preview(backend.preview(args.pattern)))
        except InputError as e:
            print(str(e), file=sys.stderr)
            return 1
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    # lifecycle INFO logs would interleave with command output
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if args.command == "serve":
        import uvicorn
        host, port = serve_address(settings, args.host, args.port)
        uvicorn.run("timekeeper.main:app", host=host, port=port)
        return 0

    backend = open_backend(settings, local=args.local)
    try:
        return run(args, settings, backend)
    finally:
        if isinstance(backend, TimerApiClient):
            backend.close()


if __name__ == "__main__":
    sys.exit(main())
