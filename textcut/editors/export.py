"""Export editor — flattens segments into cut instructions for a transcoder."""

from typing import Any

from textcut.models import ExportCut, Segment


def to_export_cuts(segments: list[Segment]) -> list[ExportCut]:
    """One cut per segment, in playback order."""
    return [
        ExportCut(
            source_path=seg.source_path,
            start_time=seg.source_start,
            end_time=seg.source_end,
        )
        for seg in segments
    ]


def cuts_to_dicts(cuts: list[ExportCut]) -> list[dict[str, Any]]:
    return [
        {"sourcePath": c.source_path, "startTime": c.start_time, "endTime": c.end_time}
        for c in cuts
    ]
