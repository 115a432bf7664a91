from __future__ import annotations

import argparse
import json
import logging
import sys

from . import calculator
from .config import load_config
from .controller import MeasurementController
from .errors import HeightifyError
from .event_logger import EventLogger
from .logging_config import setup_logging
from .models import MeasurementType
from .source import ScriptedPointSource
from .validation import parse_centimeters, parse_points

logger = logging.getLogger(__name__)

MEASUREMENT_TYPES = {
    "chair": MeasurementType.CHAIR_HEIGHT,
    "desk": MeasurementType.DESK_HEIGHT,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="heightify",
                                     description="Ergonomic chair and desk height utilities.")
    parser.add_argument("--config", type=str, default=None, help="JSON config file")
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--json", action="store_true", help="Print machine-readable output")

    sub = parser.add_subparsers(dest="command", required=True)

    recommend = sub.add_parser("recommend", help="Recommended chair and desk heights")
    recommend.add_argument("--height", required=True, help="Body height in cm")

    ranges = sub.add_parser("ranges", help="Recommended height ranges")
    ranges.add_argument("--height", required=True, help="Body height in cm")

    analyze = sub.add_parser("analyze", help="Grade a current chair and desk")
    analyze.add_argument("--height", required=True, help="Body height in cm")
    analyze.add_argument("--chair", required=True, help="Current chair height in cm")
    analyze.add_argument("--desk", required=True, help="Current desk height in cm")

    measure = sub.add_parser("measure", help="Run scripted picks through a measurement")
    measure.add_argument("--points", required=True,
                         help="Semicolon-separated x,y,z picks in meters; empty entries are misses")
    measure.add_argument("--type", choices=sorted(MEASUREMENT_TYPES), default="chair")
    return parser


def _run_calculator(args, config) -> str:
    height = parse_centimeters(args.height, "height")

    if args.command == "recommend":
        heights = calculator.calculate_optimal_heights(height, config)
        if args.json:
            return json.dumps({"chair_height": heights.chair_height, "desk_height": heights.desk_height})
        return calculator.format_recommendation(heights)

    if args.command == "ranges":
        ranges = calculator.get_height_ranges(height, config)
        if args.json:
            return json.dumps({
                name: {"minimum": r.minimum, "optimal": r.optimal, "maximum": r.maximum}
                for name, r in (("chair", ranges.chair), ("desk", ranges.desk))
            })
        return calculator.format_ranges(ranges)

    chair = parse_centimeters(args.chair, "chair")
    desk = parse_centimeters(args.desk, "desk")
    comparison = calculator.analyze_current_setup(height, chair, desk, config)
    if args.json:
        return json.dumps(comparison.as_dict())
    return calculator.format_analysis(comparison)


def _run_measure(args, config) -> str:
    points = parse_points(args.points)
    event_logger = EventLogger(config.event_log_directory) if config.event_log_directory else None
    controller = MeasurementController(ScriptedPointSource(points), config, event_logger)
    controller.on_error = lambda message: logger.warning(message)

    snapshot = controller.start_measurement(MEASUREMENT_TYPES[args.type])
    for _ in points:
        snapshot = controller.handle_tap()
    return json.dumps(snapshot.as_dict())


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        setup_logging(args.log_level or config.log_level)

        if args.command == "measure":
            output = _run_measure(args, config)
        else:
            output = _run_calculator(args, config)
    except HeightifyError as e:
        print(f"heightify: error: {e}", file=sys.stderr)
        return 2

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
