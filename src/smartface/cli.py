"""CLI for smartface: ``smartface capture``, ``smartface check``, ``smartface info``."""

import argparse
import json
import logging
import sys
from typing import Optional

logger = logging.getLogger(__name__)


def _add_gate_args(parser: argparse.ArgumentParser) -> None:
    """Add --config and the per-threshold overrides to a parser."""
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="YAML file with gate settings (max_captures, max_yaw_degrees, ...)",
    )
    parser.add_argument("--max-captures", type=int, default=None, help="Capture limit")
    parser.add_argument("--max-yaw", type=float, default=None, help="Max |yaw| in degrees")
    parser.add_argument("--max-pitch", type=float, default=None, help="Max |pitch| in degrees")
    parser.add_argument(
        "--padding", type=float, default=None,
        help="Crop padding as a fraction of the landmark box",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartface",
        description="Face-capture quality gate",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  smartface capture video.mp4 -o ./captures          # Save up to 5 good crops
  smartface capture 0 --max-captures 3 --max-yaw 10  # From webcam 0
  smartface check face.jpg                            # Pose verdict for one image
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    sub = parser.add_subparsers(dest="command")

    # smartface capture
    cap_p = sub.add_parser("capture", help="Capture gated face crops from a video")
    cap_p.add_argument("input", help="Input source: file path or camera index (int)")
    cap_p.add_argument(
        "-o", "--output-dir",
        default="./captures",
        help="Directory for cropped faces (default: ./captures)",
    )
    cap_p.add_argument(
        "--estimator",
        choices=["depth", "ratio"],
        default="depth",
        help="Pose estimator (default: depth)",
    )
    cap_p.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop after N frames",
    )
    _add_gate_args(cap_p)

    # smartface check
    check_p = sub.add_parser("check", help="Analyze head pose in a single image")
    check_p.add_argument("image", help="Image file path")
    check_p.add_argument(
        "--landmarks", action="store_true",
        help="Include all landmarks in the JSON output",
    )
    _add_gate_args(check_p)

    # smartface info
    info_p = sub.add_parser("info", help="Show version, estimators and configuration")
    _add_gate_args(info_p)

    return parser


def _resolve_input(input_str: str):
    """Resolve an input argument to a source path or camera index."""
    try:
        return int(input_str)
    except ValueError:
        return input_str


def _load_config(args: argparse.Namespace):
    """Build a GateConfig from --config, then apply flag overrides."""
    from dataclasses import replace

    from smartface.config import GateConfig

    config = GateConfig.from_yaml(args.config) if args.config else GateConfig()
    overrides = {}
    if args.max_captures is not None:
        overrides["max_captures"] = args.max_captures
    if args.max_yaw is not None:
        overrides["max_yaw_degrees"] = args.max_yaw
    if args.max_pitch is not None:
        overrides["max_pitch_degrees"] = args.max_pitch
    if args.padding is not None:
        overrides["padding"] = args.padding
    return replace(config, **overrides) if overrides else config


def _cmd_capture(args: argparse.Namespace) -> int:
    """Handle ``smartface capture``."""
    from smartface.backends.mediapipe_face import MediaPipeFaceMeshBackend
    from smartface.capture import SmartCaptureAnalyzer
    from smartface.pose import get_estimator
    from smartface.runner import CaptureRunner

    config = _load_config(args)
    analyzer = SmartCaptureAnalyzer(config, estimator=get_estimator(args.estimator))
    runner = CaptureRunner(
        analyzer,
        MediaPipeFaceMeshBackend(),
        output_dir=args.output_dir,
        on_observation=_print_observation,
    )
    result = runner.run(_resolve_input(args.input), max_frames=args.max_frames)
    print(
        f"\nDone: {result.frame_count} frames, "
        f"{result.capture_count}/{config.max_captures} captured, "
        f"{len(result.saved_paths)} saved to {args.output_dir}"
    )
    return 0


def _print_observation(frame, obs) -> None:
    output = obs.data
    if output.status is None:
        return
    print(
        f"[{frame.frame_id:5d}] {output.status:40s} "
        f"yaw={output.pose.yaw:7.1f} pitch={output.pose.pitch:7.1f} "
        f"captured={output.capture_count}"
    )


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle ``smartface check``."""
    import cv2

    from smartface.backends.mediapipe_face import MediaPipeFaceMeshBackend
    from smartface.processor import SmartFaceProcessor

    image = cv2.imread(args.image)
    if image is None:
        print(f"Cannot read image: {args.image}", file=sys.stderr)
        return 1

    processor = SmartFaceProcessor(_load_config(args), backend=MediaPipeFaceMeshBackend())
    processor.initialize()
    try:
        result = processor.detect_face(image)
    finally:
        processor.cleanup()

    print(json.dumps(result.to_dict(include_landmarks=args.landmarks), indent=2, ensure_ascii=False))
    return 0 if result.quality_good else 2


def _cmd_info(args: argparse.Namespace) -> int:
    """Handle ``smartface info``."""
    from smartface.gate import CAPTURE_PITCH_MULTIPLIER, STRICT_PITCH_MULTIPLIER
    from smartface.pose import ESTIMATORS
    from smartface.processor import SmartFaceProcessor

    config = _load_config(args)
    processor = SmartFaceProcessor(config)
    print(processor.version)
    print(f"Estimators: {', '.join(sorted(ESTIMATORS))}")
    print(f"Config: {processor.describe_config()}, Padding: {config.padding:.2f}")
    print(
        f"Effective max pitch: capture={config.max_pitch_degrees * CAPTURE_PITCH_MULTIPLIER:.1f}°, "
        f"check={config.max_pitch_degrees * STRICT_PITCH_MULTIPLIER:.1f}°"
    )
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)

    handlers = {
        "capture": _cmd_capture,
        "check": _cmd_check,
        "info": _cmd_info,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (FileNotFoundError, ImportError, RuntimeError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
