"""
SonicState v1 CLI - Argument parsing and dispatch.

Responsibilities:
- Argument parsing
- Loading the input recording into an AudioBuffer
- Printing the AnalysisResult as JSON
- Exit codes

Forbidden:
- No writes to disk (result goes to stdout only)
- No analysis logic (delegates to sonicstate.pipeline)
"""

import argparse
import logging
import sys
from pathlib import Path

from sonicstate.config import MAX_PITCH_HZ, MIN_PITCH_HZ, PITCH_METHODS, YIN_THRESHOLD


logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sonicstate",
        description="SonicState v1 command-line interface.",
    )

    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a voice recording and print the result as JSON.",
        description=(
            "Analyze a voice recording and print the result as JSON.\n\n"
            "The recording is downmixed to mono and resampled to 16 kHz.\n"
            "Nothing is stored; the result is printed to stdout only."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    analyze_parser.add_argument(
        "--input",
        metavar="PATH",
        required=True,
        help="Path to input audio file (WAV).",
    )
    analyze_parser.add_argument(
        "--min-freq",
        metavar="HZ",
        type=float,
        default=MIN_PITCH_HZ,
        help=f"Lowest detectable pitch (default: {MIN_PITCH_HZ:g}).",
    )
    analyze_parser.add_argument(
        "--max-freq",
        metavar="HZ",
        type=float,
        default=MAX_PITCH_HZ,
        help=f"Highest detectable pitch (default: {MAX_PITCH_HZ:g}).",
    )
    analyze_parser.add_argument(
        "--threshold",
        metavar="T",
        type=float,
        default=YIN_THRESHOLD,
        help=f"Pitch detection threshold (default: {YIN_THRESHOLD:g}).",
    )
    analyze_parser.add_argument(
        "--pitch-method",
        choices=PITCH_METHODS,
        default="yin",
        help="Pitch estimator (default: yin).",
    )
    analyze_parser.add_argument(
        "--all-insights",
        action="store_true",
        help="Also list every matching insight, highest priority first.",
    )
    analyze_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline events to stderr.",
    )

    return parser


def cmd_analyze(args: argparse.Namespace) -> int:
    """
    Handle the 'analyze' subcommand.

    Returns exit code.
    """
    from sonicstate.audio import load_buffer
    from sonicstate.config import AnalysisConfig, PitchConfig
    from sonicstate.log import configure_logging
    from sonicstate.pipeline import analyze_or_fallback
    from sonicstate.scoring.insights import insight_category, matching_insights
    from sonicstate.utils import serialize_json

    configure_logging(args.verbose)

    try:
        config = AnalysisConfig(
            pitch=PitchConfig(
                min_freq=args.min_freq,
                max_freq=args.max_freq,
                threshold=args.threshold,
            ),
            pitch_method=args.pitch_method,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    input_path = Path(args.input)
    try:
        buffer = load_buffer(input_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except RuntimeError as e:
        # soundfile.LibsndfileError subclasses RuntimeError
        print(f"Error: Could not read audio from {input_path}: {e}", file=sys.stderr)
        return 1

    result = analyze_or_fallback(buffer, config)
    del buffer

    output = result.to_dict()
    output["category"] = insight_category(result.features, result.scores).value
    if args.all_insights:
        output["matching_insights"] = matching_insights(result.features, result.scores)

    sys.stdout.write(serialize_json(output))
    return 0


def main() -> None:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "analyze":
        exit_code = cmd_analyze(args)
        sys.exit(exit_code)
