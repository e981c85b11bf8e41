"""
Acquisition session: one test phase from first burst to processed result.

The producer (device callback thread) hands bursts to ``on_burst``. The
consumer thread calls ``pump`` periodically, which moves queued bursts into
the capture and streams every sample into the recorder. ``complete`` runs
the spectral pipeline on the whole capture and seals the recording.
"""

import threading
from pathlib import Path
from typing import List, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from brainscreen.core.exceptions import ValidationError
from brainscreen.core.logging import get_logger
from brainscreen.data.recorder import BiosignalRecorder
from brainscreen.pipeline.spectral_pipeline import BrainwaveProcessResult, SpectralPipeline
from brainscreen.signal_processing.buffer import BurstQueue

logger = get_logger(__name__)


class AcquisitionSession:
    """
    Couples the burst queue, the capture accumulator and the recorder.

    ``on_burst`` may be called from any thread. ``pump`` and ``complete``
    must be called from a single consumer thread, which is the recorder's
    only writer.
    """

    def __init__(
        self,
        recording_path: Optional[str | Path] = None,
        patient_id: Optional[str] = None,
        recording_id: Optional[str] = None,
        queue: Optional[BurstQueue] = None,
        pipeline: Optional[SpectralPipeline] = None
    ) -> None:
        """
        Initialize session.

        Args:
            recording_path: EDF output path; None disables recording
            patient_id: Patient identification for the recording header
            recording_id: Recording identification for the recording header
            queue: Burst queue (a default-capacity queue if None)
            pipeline: Spectral pipeline (a default pipeline if None)
        """
        self.queue = queue if queue is not None else BurstQueue()
        self.pipeline = pipeline if pipeline is not None else SpectralPipeline()
        self.recorder: Optional[BiosignalRecorder] = None
        if recording_path is not None:
            self.recorder = BiosignalRecorder(
                recording_path,
                patient_id=patient_id,
                recording_id=recording_id
            )

        self._chunks: List[NDArray[np.float64]] = []
        self._consumer_lock = threading.Lock()
        self.rejected_bursts = 0
        self.is_complete = False
        self.result: Optional[BrainwaveProcessResult] = None

    def on_burst(self, burst: ArrayLike) -> None:
        """Producer entry point; never blocks on the consumer."""
        if self.is_complete:
            return
        self.queue.put(burst)

    def pump(self, max_bursts: Optional[int] = None) -> int:
        """
        Move queued bursts into the capture and the recording.

        Bursts are taken one at a time and each is recorded before it joins
        the capture, so on failure the capture and the recording still hold
        the same samples and later bursts stay queued.

        Returns:
            Number of samples consumed

        Raises:
            ValidationError: If a burst holds NaN or infinite samples; the
                burst is discarded
        """
        with self._consumer_lock:
            consumed = 0
            taken = 0
            while max_bursts is None or taken < max_bursts:
                bursts = self.queue.drain(1)
                if not bursts:
                    break
                burst = bursts[0]
                taken += 1

                if not np.all(np.isfinite(burst)):
                    self.rejected_bursts += 1
                    logger.warning(
                        "burst_rejected",
                        reason="non_finite_samples",
                        n_samples=int(burst.size),
                        rejected_bursts=self.rejected_bursts
                    )
                    raise ValidationError("Burst contains NaN or infinite samples")

                if self.recorder is not None:
                    self.recorder.add_samples(burst)
                self._chunks.append(burst)
                consumed += burst.size
            return consumed

    def _pump_remaining(self) -> None:
        """Drain the queue to empty, skipping rejected bursts."""
        while True:
            try:
                self.pump()
                return
            except ValidationError:
                continue

    @property
    def capture(self) -> NDArray[np.float64]:
        """All samples consumed so far, in arrival order."""
        if not self._chunks:
            return np.zeros(0)
        return np.concatenate(self._chunks)

    @property
    def n_samples(self) -> int:
        return sum(chunk.size for chunk in self._chunks)

    def complete(
        self,
        moca: Optional[float] = None,
        mmse: Optional[float] = None
    ) -> BrainwaveProcessResult:
        """
        Finish the phase: drain the queue, seal the recording, process the capture.

        Bursts rejected while draining are left out of the capture.

        Calling again returns the first result.
        """
        if self.result is not None:
            return self.result

        try:
            self._pump_remaining()
        finally:
            self.is_complete = True
            self.close()

        logger.info(
            "acquisition_completed",
            n_samples=self.n_samples,
            dropped_bursts=self.queue.dropped_bursts,
            dropped_samples=self.queue.dropped_samples,
            rejected_bursts=self.rejected_bursts
        )

        self.result = self.pipeline.assess(self.capture, moca=moca, mmse=mmse)
        return self.result

    def close(self) -> None:
        """Seal the recording, if any. Safe to call repeatedly."""
        if self.recorder is not None:
            self.recorder.finish()

    def __enter__(self) -> "AcquisitionSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.is_complete = True
        self.close()
