"""
Command-line interface for brainscreen.

Subcommands:
    analyze   Compute band biomarkers (and risk) for a capture file
    record    Convert a capture file into an EDF recording
    grip      Convert a grip strength measurement into percentile and score
    simulate  Run a synthetic acquisition session end to end
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
from numpy.typing import NDArray

from brainscreen.core.config import get_settings
from brainscreen.core.exceptions import BrainScreenError
from brainscreen.core.logging import configure_logging, get_logger
from brainscreen.data.recorder import BiosignalRecorder
from brainscreen.eeg.simulator import SyntheticSampleSource
from brainscreen.pipeline.acquisition import AcquisitionSession
from brainscreen.pipeline.spectral_pipeline import SpectralPipeline
from brainscreen.scoring.grip_strength import evaluate_grip_strength

logger = get_logger(__name__)


def load_capture(path: str | Path) -> NDArray[np.float64]:
    """
    Load a single-channel capture from a text/CSV file.

    The last column of each row is taken as the sample value; a
    non-numeric header row is skipped.
    """
    path = Path(path)
    try:
        data = np.genfromtxt(path, delimiter=",", dtype=np.float64)
    except OSError as exc:
        raise BrainScreenError(f"Cannot read capture {path}: {exc}") from exc

    data = np.atleast_1d(data)
    if data.ndim == 2:
        data = data[:, -1]
    if data.size and np.isnan(data[0]):
        data = data[1:]
    return data


def _print_json(payload: dict) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_analyze(args: argparse.Namespace) -> int:
    samples = load_capture(args.capture)
    result = SpectralPipeline().assess(samples, moca=args.moca, mmse=args.mmse)
    _print_json(result.to_dict(include_series=args.series))
    return 0 if result.success else 1


def cmd_record(args: argparse.Namespace) -> int:
    samples = load_capture(args.capture)
    with BiosignalRecorder(
        args.output,
        patient_id=args.patient_id,
        recording_id=args.recording_id
    ) as recorder:
        recorder.add_samples(samples)
    _print_json({'output': str(args.output), 'record_count': recorder.record_count})
    return 0


def cmd_grip(args: argparse.Namespace) -> int:
    result = evaluate_grip_strength(args.value, args.gender, args.age)
    _print_json(result.model_dump())
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    source = SyntheticSampleSource(seed=args.seed)
    target = int(args.duration * source.sampling_rate)

    with AcquisitionSession(recording_path=args.output) as session:
        source.start_stream()
        produced = 0
        while produced < target:
            burst = source.read_burst()
            if burst is None:
                break
            session.on_burst(burst)
            produced += burst.size
            session.pump()
        source.stop_stream()
        result = session.complete(moca=args.moca, mmse=args.mmse)

    _print_json(result.to_dict())
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brainscreen",
        description="Spectral brainwave biomarkers, risk scoring and EDF recording"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_settings().app_version}"
    )
    parser.add_argument("--log-level", default=None, help="Override log level")
    parser.add_argument(
        "--log-format", choices=["json", "console"], default=None, help="Override log format"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Compute band biomarkers for a capture file")
    analyze.add_argument("capture", type=Path, help="CSV/text file with one sample per row")
    analyze.add_argument("--moca", type=float, default=None, help="MoCA score (0-30)")
    analyze.add_argument("--mmse", type=float, default=None, help="MMSE score (0-30)")
    analyze.add_argument("--series", action="store_true", help="Include intermediate series")
    analyze.set_defaults(func=cmd_analyze)

    record = sub.add_parser("record", help="Write a capture file as an EDF recording")
    record.add_argument("capture", type=Path)
    record.add_argument("output", type=Path)
    record.add_argument("--patient-id", default=None)
    record.add_argument("--recording-id", default=None)
    record.set_defaults(func=cmd_record)

    grip = sub.add_parser("grip", help="Grip strength percentile and score")
    grip.add_argument("value", type=float, help="Grip strength in kg")
    grip.add_argument("--gender", required=True, help="male/female")
    grip.add_argument("--age", type=int, required=True)
    grip.set_defaults(func=cmd_grip)

    simulate = sub.add_parser("simulate", help="Run a synthetic acquisition session")
    simulate.add_argument("--duration", type=float, default=10.0, help="Seconds to acquire")
    simulate.add_argument("--output", type=Path, default=None, help="Optional EDF output path")
    simulate.add_argument("--moca", type=float, default=None)
    simulate.add_argument("--mmse", type=float, default=None)
    simulate.add_argument("--seed", type=int, default=None)
    simulate.set_defaults(func=cmd_simulate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.log_level or args.log_format:
        configure_logging(log_level=args.log_level, log_format=args.log_format)

    try:
        return args.func(args)
    except BrainScreenError as exc:
        logger.error("command_failed", command=args.command, error_code=exc.code, error=exc.message)
        print(f"error: {exc.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
