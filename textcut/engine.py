"""Orchestrator — turns an edit state into playback segments."""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from textcut import ffutil
from textcut.analyzers.ranges import collect_ranges
from textcut.editors.export import to_export_cuts
from textcut.editors.merge import merge_ranges
from textcut.manifest import Manifest, SegmentationConfig
from textcut.models import EditState, ElementaryRange, ExportCut, Segment
from textcut.query import total_duration_frames
from textcut.timecode import Frames

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    segments: list[Segment] = field(default_factory=list)
    cuts: list[ExportCut] = field(default_factory=list)
    total_frames: Frames = Frames(1)
    ranges_count: int = 0
    entries_skipped: int = 0


def _segment(
    state: EditState,
    config: SegmentationConfig | None,
    on_stage: Callable[[str, float], None] | None = None,
) -> tuple[list[ElementaryRange], list[int], list[Segment]]:
    if on_stage:
        on_stage("Extracting ranges", 0.3)
    ranges, skipped = collect_ranges(state)

    if on_stage:
        on_stage("Merging segments", 0.6)
    segments = merge_ranges(ranges, config)

    logger.debug(
        "Computed %d segments from %d ranges (%d entries)",
        len(segments), len(ranges), len(state.timeline.entries),
    )
    return ranges, skipped, segments


def compute_segments(
    state: EditState, config: SegmentationConfig | None = None
) -> list[Segment]:
    """Run both passes over an edit state snapshot.

    Pure and deterministic: the same state always yields the same segments.
    Dangling references are skipped, so this always returns a (possibly
    empty) list.
    """
    _, _, segments = _segment(state, config)
    return segments


def process(
    manifest: Manifest,
    on_progress: Callable[[str, float], None] | None = None,
) -> EngineResult:
    """Compute segments, total length and export cuts for a project.

    Args:
        manifest: Validated project manifest.
        on_progress: Optional callback(stage_name, fraction_complete).
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    state = manifest.state

    if manifest.probe_sources:
        _progress("Probing sources", 0.0)
        probed = ffutil.populate_dimensions(state.sources.values())
        state = replace(state, sources={s.id: s for s in probed})

    ranges, skipped, segments = _segment(state, manifest.segmentation, _progress)
    if skipped:
        logger.info("%d included entries produced no playable range", len(skipped))

    _progress("Building export cuts", 0.9)
    cuts = to_export_cuts(segments)

    _progress("Done", 1.0)
    return EngineResult(
        segments=segments,
        cuts=cuts,
        total_frames=total_duration_frames(segments),
        ranges_count=len(ranges),
        entries_skipped=len(skipped),
    )
