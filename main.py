#!/usr/bin/env python3
"""
SHOTFORM Replay Driver

Feeds a recorded landmark stream through the shot form analyzer, one
frame at a time, and logs what a live display would show.

Input is JSON lines. Each line is either a pose frame
    {"timestamp": 0.033, "landmarks": [{"id": 12, "x": 0.5, "y": 0.4}, ...]}
    {"timestamp": 0.066, "landmarks": null}          # nobody in view
or a control record
    {"command": "start" | "stop" | "reset"}

Usage:
    python main.py --input recordings/free_throw.jsonl
    python main.py --input recordings/free_throw.jsonl --window 15 -v
"""

import argparse
import json
import logging
import sys
from typing import Iterable, List, Optional

from core.config import settings
from shared.utils import setup_logger
from shotform_service.models import (
    ShotFormAnalyzer,
    ShotFormResult,
    pose_frame_from_dict,
)

logger = logging.getLogger("shotform.main")

COMMANDS = {"start", "stop", "reset"}


def log_result(result: ShotFormResult):
    """Listener standing in for the display."""
    if not result.detected:
        logger.info(f"[{result.timestamp:.3f}] {result.message}")
        return

    data = result.to_dict()
    metrics = data["metrics"]
    feedback = data["feedback"]
    logger.info(
        f"[{result.timestamp:.3f}] score={data['overall_score']} ({feedback['tier']}) "
        f"elbow={metrics['elbow_angle']}° release={metrics['release_angle']}° "
        f"knee={metrics['knee_angle']}° alignment={metrics['alignment_score']}"
    )
    for tip in feedback["tips"]:
        logger.debug(f"    tip: {tip}")


def replay(lines: Iterable[str], analyzer: ShotFormAnalyzer) -> List[ShotFormResult]:
    """
    Run every record through the analyzer.

    The analyzer is started before the first record. Blank lines are
    ignored; malformed JSON raises ValueError with the line number.

    Returns:
        Results emitted by the analyzer (frames received while stopped
        produce none)
    """
    results = []
    analyzer.start()

    for line_no, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue

        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"Line {line_no}: invalid JSON ({e.msg})") from e

        if not isinstance(record, dict):
            raise ValueError(f"Line {line_no}: expected a JSON object, got {type(record).__name__}")

        command = record.get("command")
        if command is not None:
            if not isinstance(command, str) or command not in COMMANDS:
                raise ValueError(f"Line {line_no}: unknown command {command!r}")
            getattr(analyzer, command)()
            continue

        try:
            frame = pose_frame_from_dict(record)
        except ValueError as e:
            raise ValueError(f"Line {line_no}: {e}") from e
        result = analyzer.process_frame(frame)
        if result is not None:
            results.append(result)

    return results


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay a landmark recording through the shot form analyzer"
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='JSON-lines landmark recording'
    )
    parser.add_argument(
        '--window',
        type=int,
        default=None,
        help=f'Rolling window size in frames (default: {settings.METRIC_WINDOW_SIZE})'
    )
    parser.add_argument(
        '--min-visibility',
        type=float,
        default=None,
        help='Treat landmarks below this visibility as missing'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose/debug logging'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    setup_logger("shotform", level=logging.DEBUG if args.verbose else settings.LOG_LEVEL)

    try:
        analyzer = ShotFormAnalyzer(window_size=args.window, min_visibility=args.min_visibility)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    analyzer.add_listener(log_result)

    try:
        with open(args.input, encoding="utf-8") as f:
            replay(f, analyzer)
    except FileNotFoundError:
        logger.error(f"Recording not found: {args.input}")
        return 1
    except ValueError as e:
        logger.error(f"Replay failed: {e}")
        return 1

    stats = analyzer.get_stats()
    last = analyzer.last_result
    logger.info("=" * 60)
    logger.info(f"Frames analyzed: {stats['frames_analyzed']}  skipped: {stats['frames_skipped']}")
    if last is not None:
        logger.info(f"Final score: {last.overall_score} ({last.feedback.tier.value})")
        logger.info(last.feedback.message)
    else:
        logger.info("No frame with a complete pose was analyzed")

    return 0


if __name__ == '__main__':
    sys.exit(main())
