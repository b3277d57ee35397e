"""Screen-capture backends, probed in priority order."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional, Sequence


class CaptureBackend:
    """A command-line capture utility that records until interrupted.

    Subclasses name the executable, the file extension it writes, and how to
    build its argument list. ``RecordingManager`` handles the process itself.
    """

    name: str = ""
    executable: str = ""
    extension: str = ".mov"

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def target_path(self, base_path: Path) -> Path:
        return base_path.with_suffix(self.extension)

    def build_command(self, output_path: Path, display_id: Optional[int] = None) -> List[str]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.executable!r})"


class ScreencaptureBackend(CaptureBackend):
    """macOS ``screencapture`` in video mode."""

    name = "screencapture"
    executable = "screencapture"
    extension = ".mov"

    def build_command(self, output_path: Path, display_id: Optional[int] = None) -> List[str]:
        # -v video mode, -C show cursor
        cmd = [self.executable, "-v", "-C"]
        if display_id is not None:
            cmd.extend(["-D", str(display_id)])
        cmd.append(str(output_path))
        return cmd


class FfmpegBackend(CaptureBackend):
    """``ffmpeg`` reading the avfoundation screen device, encoded with x264."""

    name = "ffmpeg"
    executable = "ffmpeg"
    extension = ".mp4"
    framerate = 30

    def build_command(self, output_path: Path, display_id: Optional[int] = None) -> List[str]:
        device = f"{display_id}:none" if display_id is not None else "1:none"
        return [
            self.executable,
            "-f", "avfoundation",
            "-framerate", str(self.framerate),
            "-i", device,
            "-c:v", "libx264",
            "-preset", "ultrafast",
            "-y",
            str(output_path),
        ]


DEFAULT_BACKENDS: Sequence[CaptureBackend] = (ScreencaptureBackend(), FfmpegBackend())


def select_backend(backends: Sequence[CaptureBackend]) -> Optional[CaptureBackend]:
    for backend in backends:
        if backend.is_available():
            return backend
    return None


__all__ = [
    "CaptureBackend",
    "ScreencaptureBackend",
    "FfmpegBackend",
    "DEFAULT_BACKENDS",
    "select_backend",
]
