"""Command-line tools for exported capture sessions.

Usage:
    python -m handset.cli summary handset_Caveat_<id>.json
    python -m handset.cli replay handset_Caveat_<id>.json --char A --speed 2
    python -m handset.cli replay session.json --char A --variant <id> --pen-lift-gaps
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_SPEED, DEFAULT_WIDTH_GAIN, FRAME_INTERVAL_MS, configure_logging
from .domain.variant import TracingSession, Variant
from .errors import HandsetError
from .playback.engine import PlayerState, RevealPlayer
from .playback.frames import PlaybackParams
from .playback.scheduler import FrameScheduler, ManualClock
from .storage.serialization import load_session_file

logger = logging.getLogger(__name__)


def _create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='handset', description='Inspect and replay captured handwriting')
    parser.add_argument('--log-level', default='WARNING', help='Log level')
    sub = parser.add_subparsers(dest='command', required=True)

    summary = sub.add_parser('summary', help='Per-character capture summary')
    summary.add_argument('file', help='Exported session JSON')

    replay = sub.add_parser('replay', help='Replay a variant headlessly')
    replay.add_argument('file', help='Exported session JSON')
    replay.add_argument('--char', required=True, help='Character to replay')
    replay.add_argument('--variant', help='Variant id (default: first starred, else first)')
    replay.add_argument('--speed', type=float, default=DEFAULT_SPEED, help='Speed multiplier')
    replay.add_argument('--width-gain', type=float, default=DEFAULT_WIDTH_GAIN, help='Pressure width gain 0-100')
    replay.add_argument('--size', type=int, nargs=2, default=(400, 400), metavar=('W', 'H'),
                        help='Canvas size in pixels')
    replay.add_argument('--pen-lift-gaps', action='store_true', help='Pause between strokes as recorded')
    replay.add_argument('--ink-lag', type=float, default=0.0, help='Glyph fade-in in ms (0-120)')
    return parser


def summarize(session: TracingSession) -> List[str]:
    captured, total = session.captured_count(), len(session.set)
    lines = [f"{session.font.family} ({session.session_id}): {captured}/{total} captured"]
    for char, data in session.set.items():
        if not data.variants:
            continue
        starred = sum(1 for v in data.variants if v.starred)
        durations = [v.stats.duration_ms for v in data.variants]
        arcs = [v.stats.arc_len for v in data.variants]
        lines.append(
            f"  {char!r}: {len(data.variants)} variants ({starred} starred), "
            f"mean {sum(durations) / len(durations):.0f} ms, "
            f"mean arc {sum(arcs) / len(arcs):.1f}"
        )
    return lines


def pick_variant(session: TracingSession, char: str, variant_id: Optional[str] = None) -> Variant:
    """Select a variant of char: by id, else the first starred one, else the first.

    Raises:
        KeyError: If the character or the requested variant does not exist.
    """
    data = session.set.get(char)
    if data is None or not data.variants:
        raise KeyError(f"no variants captured for {char!r}")
    if variant_id:
        for v in data.variants:
            if v.id == variant_id:
                return v
        raise KeyError(f"variant {variant_id} not found for {char!r}")
    return next((v for v in data.variants if v.starred), data.variants[0])


def replay(variant: Variant, params: PlaybackParams, canvas_size=(400, 400)) -> RevealPlayer:
    """Run a playback to completion on a simulated 60 fps clock."""
    clock = ManualClock()
    scheduler = FrameScheduler()
    player = RevealPlayer(scheduler, tuple(canvas_size), clock=clock)
    player.play(variant, params)
    scheduler.run_until_idle(clock, FRAME_INTERVAL_MS)
    return player


def _run_replay(args: argparse.Namespace) -> int:
    session = load_session_file(args.file)
    variant = pick_variant(session, args.char, args.variant)
    params = PlaybackParams(speed_multiplier=args.speed, width_gain=args.width_gain,
                            pen_lift_gaps=args.pen_lift_gaps, ink_lag_ms=args.ink_lag)
    player = replay(variant, params, args.size)
    frame = player.last_frame
    print(f"variant {variant.id}: {variant.segment_count} segments, "
          f"{player.timeline.total_ms:.0f} ms recorded")
    print(f"{player.frame_count} frames, {frame.elapsed:.0f} ms animation time, "
          f"revealed {frame.revealed:.0%}, state {player.state.value}")
    return 0 if player.state is PlayerState.COMPLETED else 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = _create_argument_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        if args.command == 'summary':
            for line in summarize(load_session_file(args.file)):
                print(line)
            return 0
        return _run_replay(args)
    except (OSError, KeyError, ValueError, HandsetError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
