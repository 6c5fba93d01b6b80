"""ffprobe subprocess helpers for lazily filling in source metadata."""

import json
import logging
import shutil
import subprocess
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from textcut.models import ProbeResult, Source
from textcut.timecode import FPS

logger = logging.getLogger(__name__)


class FFprobeNotFoundError(RuntimeError):
    pass


def check_ffprobe() -> None:
    """Raise FFprobeNotFoundError if ffprobe is not on PATH."""
    if shutil.which("ffprobe") is None:
        raise FFprobeNotFoundError("ffprobe not found on PATH")


def probe(input_path: Path) -> ProbeResult:
    """Extract media metadata via ffprobe."""
    cmd = [
        "ffprobe",
        "-v", "quiet",
        "-print_format", "json",
        "-show_format",
        "-show_streams",
        str(input_path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    data = json.loads(result.stdout)

    video_stream = next(
        (s for s in data["streams"] if s["codec_type"] == "video"), None
    )
    if video_stream is None:
        raise ValueError(f"No video stream found in {input_path}")

    # Parse fps from r_frame_rate (e.g. "30000/1001")
    num, den = video_stream["r_frame_rate"].split("/")
    fps = int(num) / int(den) if int(den) else 0.0

    return ProbeResult(
        duration=float(data["format"].get("duration", 0.0)),
        width=int(video_stream["width"]),
        height=int(video_stream["height"]),
        fps=fps,
    )


def populate_dimensions(sources: Iterable[Source]) -> list[Source]:
    """Return sources with missing width/height filled in from ffprobe.

    Sources that already know their size are returned untouched. A source
    that cannot be probed is kept as is so the timeline stays playable.
    """
    check_ffprobe()
    out: list[Source] = []
    for src in sources:
        if src.width is not None and src.height is not None:
            out.append(src)
            continue
        try:
            info = probe(Path(src.path))
        except (subprocess.CalledProcessError, ValueError, KeyError) as e:
            logger.warning("Could not probe %s: %s", src.path, e)
            out.append(src)
            continue
        if info.fps and abs(info.fps - FPS) > 0.01:
            logger.warning(
                "Source %s runs at %.3f fps; timeline is quantized to %d fps",
                src.id, info.fps, FPS,
            )
        out.append(replace(src, width=info.width, height=info.height))
    return out
