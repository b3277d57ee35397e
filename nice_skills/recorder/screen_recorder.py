"""Screen recording sessions backed by an external capture process.

Each recording owns exactly one child process. The manager is the only code
that signals those processes: ``start`` registers them, ``stop`` interrupts and
unregisters them, and a per-recording watcher drops entries whose process dies
with an error on its own.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from uuid import uuid4

from ..core.results import ToolResult
from .backends import DEFAULT_BACKENDS, CaptureBackend, select_backend

logger = logging.getLogger(__name__)

NO_BACKEND_MESSAGE = "No screen recording tool available. Install ffmpeg or use macOS with screencapture."
START_GRACE_SECONDS = 0.5
STOP_TIMEOUT_SECONDS = 5.0
_TAIL_BYTES = 2000


def generate_recording_id() -> str:
    return f"rec_{int(time.time() * 1000)}_{uuid4().hex[:6]}"


@dataclass
class Recording:
    id: str
    process: asyncio.subprocess.Process
    output_path: Path
    start_time: float
    backend: CaptureBackend
    stopping: bool = False
    stderr_tail: bytes = b""
    watcher: Optional["asyncio.Task[None]"] = field(default=None, repr=False)


async def _drain(stream: Optional[asyncio.StreamReader]) -> bytes:
    """Read ``stream`` to EOF so the child never blocks on a full pipe."""
    if stream is None:
        return b""
    tail = b""
    while True:
        chunk = await stream.read(4096)
        if not chunk:
            return tail
        tail = (tail + chunk)[-_TAIL_BYTES:]


class RecordingManager:
    """Registry of in-flight screen recordings.

    Args:
        output_dir: Directory the capture files are written to. Created on
            demand when a recording starts.
        backends: Capture backends in priority order; the first available
            one is used.
        start_grace: Seconds to wait after spawning before checking that the
            capture process is still alive.
        stop_timeout: Seconds to wait for a graceful exit before killing.
    """

    def __init__(
        self,
        output_dir: Path,
        backends: Sequence[CaptureBackend] = DEFAULT_BACKENDS,
        *,
        start_grace: float = START_GRACE_SECONDS,
        stop_timeout: float = STOP_TIMEOUT_SECONDS,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.backends = list(backends)
        self.start_grace = start_grace
        self.stop_timeout = stop_timeout
        self._recordings: Dict[str, Recording] = {}

    def _prepare_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def _primary_path(self, recording_id: str) -> Path:
        base = self.output_dir / recording_id
        return self.backends[0].target_path(base) if self.backends else base.with_suffix(".mov")

    def _output_candidates(self, recording: Recording) -> List[Path]:
        candidates = [recording.output_path]
        for backend in self.backends:
            path = backend.target_path(recording.output_path)
            if path not in candidates:
                candidates.append(path)
        return candidates

    def list_active(self) -> List[str]:
        return list(self._recordings)

    async def start(self, display_id: Optional[int] = None) -> ToolResult:
        backend = select_backend(self.backends)
        if backend is None:
            logger.warning("No capture backend found on PATH")
            return ToolResult.fail(NO_BACKEND_MESSAGE)

        recording_id = generate_recording_id()
        self._prepare_output_dir()
        output_path = self._primary_path(recording_id)
        cmd = backend.build_command(backend.target_path(output_path), display_id)
        logger.info(f"Starting recording {recording_id} with {backend.name}: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error(f"Recording {recording_id} could not be spawned: {exc}")
            return ToolResult.fail(f"Failed to start recording: {exc}")

        recording = Recording(
            id=recording_id,
            process=process,
            output_path=output_path,
            start_time=time.time(),
            backend=backend,
        )
        self._recordings[recording_id] = recording
        recording.watcher = asyncio.create_task(self._watch(recording))

        await asyncio.sleep(self.start_grace)

        if process.returncode is not None:
            self._recordings.pop(recording_id, None)
            return ToolResult.fail("Failed to start recording - process exited immediately")

        return ToolResult.ok(
            f"Recording started with ID: {recording_id}",
            recordingId=recording_id,
            outputPath=str(output_path),
        )

    async def _watch(self, recording: Recording) -> None:
        """Drop a recording whose capture process exits non-zero before ``stop`` is called."""
        process = recording.process
        _, recording.stderr_tail = await asyncio.gather(_drain(process.stdout), _drain(process.stderr))
        returncode = await process.wait()
        if recording.stopping or returncode == 0:
            return
        detail = recording.stderr_tail.decode("utf-8", errors="replace").strip()
        logger.error(f"Recording {recording.id} error: {recording.backend.name} exited with status {returncode}. {detail}")
        if self._recordings.get(recording.id) is recording:
            del self._recordings[recording.id]

    def _interrupt(self, process: asyncio.subprocess.Process) -> None:
        # screencapture stops on Ctrl+C from its input; ffmpeg on SIGINT
        try:
            if process.stdin is not None:
                process.stdin.write(b"\x03")
            process.send_signal(signal.SIGINT)
        except Exception:
            pass

    async def stop(self, recording_id: str) -> ToolResult:
        recording = self._recordings.get(recording_id)
        if recording is None:
            return ToolResult.fail(f"No active recording found with ID: {recording_id}")

        recording.stopping = True
        process = recording.process
        self._interrupt(process)

        try:
            await asyncio.wait_for(process.wait(), timeout=self.stop_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Recording {recording_id} did not exit within {self.stop_timeout}s, killing")
            try:
                process.kill()
            except Exception:
                pass

        self._recordings.pop(recording_id, None)
        duration = round(time.time() - recording.start_time, 3)

        for candidate in self._output_candidates(recording):
            if candidate.exists():
                logger.info(f"Recording {recording_id} saved to {candidate} ({duration}s)")
                return ToolResult.ok(
                    f"Recording saved to: {candidate}",
                    recordingId=recording_id,
                    outputPath=str(candidate),
                    duration=duration,
                )

        logger.warning(f"Recording {recording_id} stopped but no output file was found")
        return ToolResult.fail("Recording file was not created")

    async def stop_all(self) -> None:
        """Stop every active recording; used when the server shuts down."""
        for recording_id in self.list_active():
            result = await self.stop(recording_id)
            logger.info(f"Shutdown stop of {recording_id}: {result.message}")


__all__ = ["Recording", "RecordingManager", "generate_recording_id", "NO_BACKEND_MESSAGE"]
