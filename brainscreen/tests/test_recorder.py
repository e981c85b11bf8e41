"""
Tests for the EDF biosignal recorder.
"""

from datetime import datetime

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from brainscreen.core.exceptions import RecordingIOError, ValidationError
from brainscreen.data.recorder import (
    GLOBAL_HEADER_BYTES,
    RECORD_COUNT_OFFSET,
    BiosignalRecorder,
    RecorderState,
    SignalSpec,
    header_size,
    read_header,
    read_physical_samples,
    read_samples,
)


@pytest.fixture
def recording_path(tmp_path):
    return tmp_path / "session" / "capture.edf"


@pytest.fixture
def start_time():
    return datetime(2024, 3, 5, 14, 7, 9)


class TestLayout:
    """Byte-level header layout."""

    def test_offsets(self):
        assert GLOBAL_HEADER_BYTES == 256
        assert RECORD_COUNT_OFFSET == 236
        assert header_size(1) == 512

    def test_header_fields(self, recording_path, start_time):
        with BiosignalRecorder(
            recording_path, patient_id="P001", recording_id="R42", start_time=start_time
        ) as recorder:
            recorder.add_samples([1.0, 2.0, 3.0])

        raw = recording_path.read_bytes()

        assert len(raw) == 512 + 3 * 2
        assert raw[0:8] == b"0       "
        assert raw[8:88] == b"P001".ljust(80)
        assert raw[88:168] == b"R42".ljust(80)
        assert raw[168:176] == b"05.03.24"
        assert raw[176:184] == b"14.07.09"
        assert raw[184:192] == b"512     "
        assert raw[236:244] == b"3       "
        assert raw[244:252] == b"0.010000"
        assert raw[252:256] == b"1   "

        signal = raw[256:]
        assert signal[0:16] == b"FP1".ljust(16)
        assert signal[16:96] == b"EDF Annotations".ljust(80)
        assert signal[96:104] == b"uV".ljust(8)
        assert signal[104:112] == b"-3000.00"
        assert signal[112:120] == b"3000.000"
        assert signal[120:128] == b"-32767  "
        assert signal[128:136] == b"32767   "
        assert signal[136:216] == b"HP:0.5Hz LP:30Hz".ljust(80)
        assert signal[216:224] == b"1       "
        assert signal[224:256] == b" " * 32

    def test_long_identifiers_truncated(self, recording_path):
        with BiosignalRecorder(recording_path, patient_id="x" * 200) as recorder:
            recorder.add_sample(0.0)

        assert read_header(recording_path).patient_id == "x" * 80

    def test_default_identifiers(self, recording_path):
        with BiosignalRecorder(recording_path):
            pass

        header = read_header(recording_path)
        assert header.patient_id == "X X X X"
        assert header.recording_id == "Startdate"


class TestLifecycle:
    """Recorder state transitions."""

    def test_record_count_matches_samples(self, recording_path):
        recorder = BiosignalRecorder(recording_path)
        recorder.add_samples(np.linspace(-10, 10, 1000))
        recorder.finish()

        header = read_header(recording_path)
        assert header.record_count == 1000
        assert header.header_bytes == 512
        assert read_samples(recording_path).shape == (1000,)

    def test_header_written_lazily(self, recording_path):
        recorder = BiosignalRecorder(recording_path)
        assert recorder.state is RecorderState.CREATED

        recorder.add_sample(1.0)
        assert recorder.state is RecorderState.HEADER_WRITTEN

        recorder.write_header()
        recorder.finish()
        assert recording_path.stat().st_size == 512 + 2

    def test_finish_without_samples(self, recording_path):
        recorder = BiosignalRecorder(recording_path)
        recorder.finish()

        assert read_header(recording_path).record_count == 0
        assert recording_path.stat().st_size == 512

    def test_placeholder_before_finish(self, recording_path):
        recorder = BiosignalRecorder(recording_path)
        recorder.add_sample(0.0)
        assert recorder.header_bytes()[236:244] == b"-1      "
        recorder.finish()

    def test_finish_idempotent(self, recording_path):
        recorder = BiosignalRecorder(recording_path)
        recorder.add_samples([1.0, 2.0])
        recorder.finish()
        first = recording_path.read_bytes()

        recorder.finish()
        recorder.close()

        assert recorder.is_sealed
        assert recording_path.read_bytes() == first

    def test_add_after_finish_is_dropped(self, recording_path):
        recorder = BiosignalRecorder(recording_path)
        recorder.add_samples([1.0, 2.0])
        recorder.finish()
        sealed = recording_path.read_bytes()

        recorder.add_sample(3.0)

        assert recorder.record_count == 2
        assert recorder.dropped_samples == 1
        assert recording_path.read_bytes() == sealed

    def test_sealed_on_exception(self, recording_path):
        with pytest.raises(RuntimeError):
            with BiosignalRecorder(recording_path) as recorder:
                recorder.add_samples([5.0, 6.0, 7.0])
                raise RuntimeError("acquisition aborted")

        assert recorder.is_sealed
        assert read_header(recording_path).record_count == 3

    def test_non_finite_sample_rejected(self, recording_path):
        with BiosignalRecorder(recording_path) as recorder:
            with pytest.raises(ValidationError):
                recorder.add_sample(float("nan"))
            assert recorder.record_count == 0

    def test_unwritable_path(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(RecordingIOError):
            BiosignalRecorder(blocker / "capture.edf")

    def test_write_after_close_raises(self, recording_path):
        recorder = BiosignalRecorder(recording_path)
        recorder.finish()

        with pytest.raises(RecordingIOError):
            recorder._write(b"\x00\x00")

    @pytest.mark.parametrize("cut", [256, 300, 479])
    def test_truncated_signal_header(self, recording_path, cut):
        with BiosignalRecorder(recording_path) as recorder:
            recorder.add_sample(1.0)
        recording_path.write_bytes(recording_path.read_bytes()[:cut])

        with pytest.raises(RecordingIOError):
            read_header(recording_path)

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(RecordingIOError):
            read_header(tmp_path / "missing.edf")


class TestSampleEncoding:
    """Physical to digital conversion."""

    def test_round_trip_within_quantization(self, recording_path):
        values = np.array([-2999.0, -150.5, -1.0, 0.0, 0.25, 42.0, 2999.9])
        with BiosignalRecorder(recording_path) as recorder:
            recorder.add_samples(values)

        spec = SignalSpec()
        step = (spec.physical_max - spec.physical_min) / (spec.digital_max - spec.digital_min)
        assert_allclose(read_physical_samples(recording_path), values, atol=step)

    def test_out_of_range_clamped(self):
        spec = SignalSpec()
        assert spec.to_digital(10000.0) == 32767
        assert spec.to_digital(-10000.0) == -32767
        assert spec.to_digital(0.0) == 0

    def test_little_endian(self, recording_path):
        with BiosignalRecorder(recording_path) as recorder:
            recorder.add_sample(3000.0)

        raw = recording_path.read_bytes()
        assert raw[512:514] == (32767).to_bytes(2, "little", signed=True)
        assert_array_equal(read_samples(recording_path), [32767])


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
