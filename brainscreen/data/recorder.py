"""
EDF-style biosignal recorder for storing raw single-channel samples.

Layout: a fixed-width ASCII header (256 bytes of global fields, then one
block of per-signal fields, then a 32 byte reserved block) followed by one
little-endian int16 per appended sample. Every sample is its own data
record, so the header's record count equals the number of samples.
"""

import struct
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from brainscreen.core.config import settings
from brainscreen.core.exceptions import RecordingIOError, ValidationError
from brainscreen.core.logging import get_logger

logger = get_logger(__name__)

# Global header fields: (name, width)
GLOBAL_FIELDS: Tuple[Tuple[str, int], ...] = (
    ("version", 8),
    ("patient_id", 80),
    ("recording_id", 80),
    ("start_date", 8),
    ("start_time", 8),
    ("header_bytes", 8),
    ("reserved", 44),
    ("record_count", 8),
    ("record_duration", 8),
    ("signal_count", 4),
)

# Per-signal fields, each written once per signal in this order
SIGNAL_FIELDS: Tuple[Tuple[str, int], ...] = (
    ("label", 16),
    ("transducer", 80),
    ("physical_unit", 8),
    ("physical_min", 8),
    ("physical_max", 8),
    ("digital_min", 8),
    ("digital_max", 8),
    ("prefilter", 80),
    ("samples_per_record", 8),
)

TRAILING_RESERVED_BYTES = 32

GLOBAL_HEADER_BYTES = sum(width for _, width in GLOBAL_FIELDS)
SIGNAL_HEADER_BYTES = sum(width for _, width in SIGNAL_FIELDS)


def field_offset(fields: Tuple[Tuple[str, int], ...], field_name: str) -> int:
    """Byte offset of a named field within a block of fields."""
    offset = 0
    for name, width in fields:
        if name == field_name:
            return offset
        offset += width
    raise KeyError(field_name)


# 236 for the layout above
RECORD_COUNT_OFFSET = field_offset(GLOBAL_FIELDS, "record_count")

SAMPLE_FORMAT = "<h"


def header_size(n_signals: int = 1) -> int:
    """Total header bytes for ``n_signals`` signals."""
    return GLOBAL_HEADER_BYTES + n_signals * SIGNAL_HEADER_BYTES + TRAILING_RESERVED_BYTES


def fixed_width(value: object, width: int) -> bytes:
    """ASCII-encode, truncate to ``width`` and right-pad with spaces."""
    text = "" if value is None else str(value)
    encoded = text.encode("ascii", errors="replace")[:width]
    return encoded.ljust(width, b" ")


def format_decimal(value: float) -> str:
    """Six-decimal rendering used by numeric header fields (truncated on write)."""
    return f"{value:.6f}"


@dataclass(frozen=True)
class SignalSpec:
    """Metadata of the single recorded channel."""

    label: str = "FP1"
    transducer: str = "EDF Annotations"
    physical_unit: str = "uV"
    physical_min: float = -3000.0
    physical_max: float = 3000.0
    digital_min: int = -32767
    digital_max: int = 32767
    prefilter: str = "HP:0.5Hz LP:30Hz"
    samples_per_record: int = 1

    def to_digital(self, value: float) -> int:
        """Clamp to the physical range and rescale into the digital range."""
        physical = max(self.physical_min, min(self.physical_max, value))
        normalized = (physical - self.physical_min) / (self.physical_max - self.physical_min)
        digital = int(self.digital_min + normalized * (self.digital_max - self.digital_min))
        return max(self.digital_min, min(self.digital_max, digital))

    def to_physical(self, digital: NDArray[np.int16]) -> NDArray[np.float64]:
        """Inverse of ``to_digital`` (up to quantization)."""
        scale = (self.physical_max - self.physical_min) / (self.digital_max - self.digital_min)
        return self.physical_min + (digital.astype(np.float64) - self.digital_min) * scale


class RecorderState(str, Enum):
    CREATED = "created"
    HEADER_WRITTEN = "header_written"
    SEALED = "sealed"


class BiosignalRecorder:
    """
    Streams raw samples into an EDF-style file.

    Lifecycle: CREATED -> HEADER_WRITTEN -> SEALED. The header is written on
    the first ``add_sample`` (or an explicit ``write_header``); ``finish``
    patches the record count and closes the file. Use as a context manager
    so the file is sealed on every exit path.

    Not thread-safe: one recording session owns the recorder and serializes
    calls to it.
    """

    def __init__(
        self,
        path: str | Path,
        patient_id: Optional[str] = None,
        recording_id: Optional[str] = None,
        signal_spec: SignalSpec = SignalSpec(),
        record_duration: float = 0.01,
        start_time: Optional[datetime] = None
    ) -> None:
        """
        Create the recording file.

        Args:
            path: Output file path (parent directories are created)
            patient_id: Patient identification field
            recording_id: Recording identification field
            signal_spec: Channel metadata
            record_duration: Nominal seconds per data record
            start_time: Recording start, defaults to now

        Raises:
            RecordingIOError: If the file cannot be created
        """
        self.path = Path(path)
        self.patient_id = settings.recording_patient_id if patient_id is None else patient_id
        self.recording_id = settings.recording_id if recording_id is None else recording_id
        self.signal_spec = signal_spec
        self.record_duration = record_duration
        self.start_time = start_time or datetime.now()

        self.record_count = 0
        self.dropped_samples = 0
        self.state = RecorderState.CREATED

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file: Optional[BinaryIO] = open(self.path, "wb")
        except OSError as exc:
            raise RecordingIOError(f"Cannot create recording {self.path}: {exc}") from exc

        logger.info(
            "biosignal_recorder_initialized",
            path=str(self.path),
            patient_id=self.patient_id,
            recording_id=self.recording_id
        )

    @property
    def is_sealed(self) -> bool:
        return self.state is RecorderState.SEALED

    def _write(self, data: bytes) -> None:
        if self._file is None:
            raise RecordingIOError(f"Recording {self.path} is already closed")
        try:
            self._file.write(data)
        except OSError as exc:
            raise RecordingIOError(f"Write to {self.path} failed: {exc}") from exc

    def header_bytes(self, record_count: int = -1) -> bytes:
        """Render the full header with the given record count."""
        spec = self.signal_spec
        global_values = {
            "version": "0",
            "patient_id": self.patient_id,
            "recording_id": self.recording_id,
            "start_date": self.start_time.strftime("%d.%m.%y"),
            "start_time": self.start_time.strftime("%H.%M.%S"),
            "header_bytes": header_size(1),
            "reserved": "",
            "record_count": record_count,
            "record_duration": format_decimal(self.record_duration),
            "signal_count": 1,
        }
        signal_values = {
            "label": spec.label,
            "transducer": spec.transducer,
            "physical_unit": spec.physical_unit,
            "physical_min": format_decimal(spec.physical_min),
            "physical_max": format_decimal(spec.physical_max),
            "digital_min": spec.digital_min,
            "digital_max": spec.digital_max,
            "prefilter": spec.prefilter,
            "samples_per_record": spec.samples_per_record,
        }

        parts = [fixed_width(global_values[name], width) for name, width in GLOBAL_FIELDS]
        parts += [fixed_width(signal_values[name], width) for name, width in SIGNAL_FIELDS]
        parts.append(fixed_width("", TRAILING_RESERVED_BYTES))
        return b"".join(parts)

    def write_header(self) -> None:
        """Write the header once; later calls do nothing."""
        if self.state is not RecorderState.CREATED:
            return
        self._write(self.header_bytes())
        self.state = RecorderState.HEADER_WRITTEN

    def add_sample(self, sample: float) -> None:
        """
        Append one sample as one data record.

        Samples added after ``finish`` are dropped (logged, not raised).

        Raises:
            ValidationError: If the sample is NaN or infinite
        """
        if self.is_sealed:
            self.dropped_samples += 1
            if self.dropped_samples == 1:
                logger.warning("sample_after_seal_dropped", path=str(self.path))
            return

        value = float(sample)
        if not np.isfinite(value):
            raise ValidationError(f"Cannot record non-finite sample {sample!r}")

        self.write_header()
        self._write(struct.pack(SAMPLE_FORMAT, self.signal_spec.to_digital(value)))
        self.record_count += 1

    def add_samples(self, samples) -> None:
        for sample in samples:
            self.add_sample(sample)

    def finish(self) -> None:
        """Patch the record count into the header and close the file."""
        if self.is_sealed:
            return

        try:
            self.write_header()
            self._file.seek(RECORD_COUNT_OFFSET)
            self._file.write(fixed_width(self.record_count, 8))
            self._file.flush()
        except OSError as exc:
            raise RecordingIOError(f"Sealing {self.path} failed: {exc}") from exc
        finally:
            self._close()

        logger.info(
            "biosignal_recorder_sealed",
            path=str(self.path),
            record_count=self.record_count
        )

    def _close(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            finally:
                self._file = None
                self.state = RecorderState.SEALED

    def close(self) -> None:
        """Alias for ``finish``."""
        self.finish()

    def __enter__(self) -> "BiosignalRecorder":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.finish()


@dataclass(frozen=True)
class EdfHeader:
    """Parsed header of a recorder file."""

    version: str
    patient_id: str
    recording_id: str
    start_date: str
    start_time: str
    header_bytes: int
    record_count: int
    record_duration: float
    signal_count: int
    signals: Tuple[dict, ...]


def _parse_fields(raw: bytes, fields) -> dict:
    values = {}
    offset = 0
    for name, width in fields:
        values[name] = raw[offset:offset + width].decode("ascii").rstrip(" ")
        offset += width
    return values


def read_header(path: str | Path) -> EdfHeader:
    """
    Parse the header of a recorder file.

    Raises:
        RecordingIOError: If the file cannot be read or is truncated
    """
    path = Path(path)
    try:
        with open(path, "rb") as fh:
            head = fh.read(GLOBAL_HEADER_BYTES)
            if len(head) < GLOBAL_HEADER_BYTES:
                raise RecordingIOError(f"{path} is too short to hold a header")
            values = _parse_fields(head, GLOBAL_FIELDS)
            n_signals = int(values["signal_count"])

            signals: List[dict] = [{} for _ in range(n_signals)]
            for name, width in SIGNAL_FIELDS:
                for signal_values in signals:
                    raw = fh.read(width)
                    if len(raw) < width:
                        raise RecordingIOError(f"{path} is truncated inside the signal header")
                    signal_values[name] = raw.decode("ascii").rstrip(" ")
    except OSError as exc:
        raise RecordingIOError(f"Cannot read recording {path}: {exc}") from exc
    except ValueError as exc:
        raise RecordingIOError(f"Malformed header in {path}: {exc}") from exc

    try:
        header_bytes = int(values["header_bytes"])
        record_count = int(values["record_count"])
        record_duration = float(values["record_duration"])
    except ValueError as exc:
        raise RecordingIOError(f"Malformed header in {path}: {exc}") from exc

    return EdfHeader(
        version=values["version"],
        patient_id=values["patient_id"],
        recording_id=values["recording_id"],
        start_date=values["start_date"],
        start_time=values["start_time"],
        header_bytes=header_bytes,
        record_count=record_count,
        record_duration=record_duration,
        signal_count=n_signals,
        signals=tuple(signals),
    )


def read_samples(path: str | Path) -> NDArray[np.int16]:
    """
    Read the digital sample body of a recorder file.

    Raises:
        RecordingIOError: If the file cannot be read
    """
    header = read_header(path)
    try:
        with open(path, "rb") as fh:
            fh.seek(header.header_bytes)
            body = fh.read()
    except OSError as exc:
        raise RecordingIOError(f"Cannot read recording {path}: {exc}") from exc

    return np.frombuffer(body, dtype="<i2").copy()


def read_physical_samples(path: str | Path, signal_spec: SignalSpec = SignalSpec()) -> NDArray[np.float64]:
    """Read the sample body and convert it back to physical units."""
    return signal_spec.to_physical(read_samples(path))
