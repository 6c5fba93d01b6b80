"""HTTP API routes for TextCut."""

import logging
import uuid
from dataclasses import replace

from flask import Blueprint, jsonify, request

from textcut import timeline_ops
from textcut.editors.export import cuts_to_dicts, to_export_cuts
from textcut.engine import compute_segments
from textcut.manifest import Manifest, parse_manifest, parse_video_override, segment_to_dict
from textcut.models import Timeline
from textcut.query import segment_at_frame, source_time_at_frame, total_duration_frames
from textcut.timecode import FPS

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)

# In-memory project store: project_id -> Manifest. Edits replace the stored
# manifest with a new one, so a computation never sees a half-applied edit.
_projects: dict[str, Manifest] = {}


def _segments_payload(manifest: Manifest) -> dict:
    segments = compute_segments(manifest.state, manifest.segmentation)
    return {
        "fps": FPS,
        "total_frames": total_duration_frames(segments),
        "segments": [segment_to_dict(s) for s in segments],
    }


def _parse_body() -> tuple[Manifest | None, tuple | None]:
    data = request.get_json(silent=True)
    if data is None:
        return None, (jsonify({"error": "Request body must be JSON"}), 400)
    try:
        return parse_manifest(data), None
    except (ValueError, TypeError) as e:
        return None, (jsonify({"error": str(e)}), 400)


def _update_timeline(project_id: str, timeline: Timeline) -> Manifest:
    manifest = _projects[project_id]
    updated = replace(manifest, state=replace(manifest.state, timeline=timeline))
    _projects[project_id] = updated
    return updated


@bp.route("/api/segments", methods=["POST"])
def segments_stateless():
    manifest, error = _parse_body()
    if error:
        return error
    return jsonify(_segments_payload(manifest))


@bp.route("/api/projects", methods=["POST"])
def create_project():
    manifest, error = _parse_body()
    if error:
        return error
    project_id = uuid.uuid4().hex[:12]
    _projects[project_id] = manifest
    logger.info(
        "Created project %s with %d entries",
        project_id, len(manifest.state.timeline.entries),
    )
    return jsonify({"project_id": project_id}), 201


@bp.route("/api/projects/<project_id>/segments")
def project_segments(project_id: str):
    if project_id not in _projects:
        return jsonify({"error": "Project not found"}), 404
    return jsonify(_segments_payload(_projects[project_id]))


@bp.route("/api/projects/<project_id>/segments/at/<int:frame>")
def project_segment_at(project_id: str, frame: int):
    if project_id not in _projects:
        return jsonify({"error": "Project not found"}), 404

    manifest = _projects[project_id]
    segments = compute_segments(manifest.state, manifest.segmentation)
    seg = segment_at_frame(segments, frame)
    if seg is None:
        return jsonify({"segment": None})
    _, seek = source_time_at_frame(segments, frame)
    return jsonify({"segment": segment_to_dict(seg), "source_time": seek})


@bp.route("/api/projects/<project_id>/export")
def project_export(project_id: str):
    if project_id not in _projects:
        return jsonify({"error": "Project not found"}), 404

    manifest = _projects[project_id]
    segments = compute_segments(manifest.state, manifest.segmentation)
    if not segments:
        return jsonify({"error": "No segments to export"}), 409
    return jsonify({"cuts": cuts_to_dicts(to_export_cuts(segments))})


@bp.route("/api/projects/<project_id>/entries/reorder", methods=["POST"])
def reorder(project_id: str):
    if project_id not in _projects:
        return jsonify({"error": "Project not found"}), 404

    body = request.get_json(silent=True) or {}
    try:
        from_index = int(body["from_index"])
        to_index = int(body["to_index"])
        timeline = timeline_ops.reorder_entry(
            _projects[project_id].state.timeline, from_index, to_index
        )
    except (KeyError, TypeError, ValueError, IndexError) as e:
        return jsonify({"error": f"Invalid reorder request: {e}"}), 400

    return jsonify(_segments_payload(_update_timeline(project_id, timeline)))


def _known_sentence(project_id: str, sentence_id: str) -> bool:
    entries = _projects[project_id].state.timeline.entries
    return any(e.sentence_id == sentence_id for e in entries)


@bp.route("/api/projects/<project_id>/entries/<sentence_id>/excluded", methods=["POST"])
def set_excluded(project_id: str, sentence_id: str):
    if project_id not in _projects:
        return jsonify({"error": "Project not found"}), 404
    if not _known_sentence(project_id, sentence_id):
        return jsonify({"error": "Sentence not in timeline"}), 404

    body = request.get_json(silent=True) or {}
    if "excluded" not in body:
        return jsonify({"error": "Missing 'excluded'"}), 400

    timeline = timeline_ops.set_entry_excluded(
        _projects[project_id].state.timeline, sentence_id, bool(body["excluded"])
    )
    return jsonify(_segments_payload(_update_timeline(project_id, timeline)))


@bp.route(
    "/api/projects/<project_id>/entries/<sentence_id>/words/<word_id>/toggle",
    methods=["POST"],
)
def toggle_word(project_id: str, sentence_id: str, word_id: str):
    if project_id not in _projects:
        return jsonify({"error": "Project not found"}), 404
    if not _known_sentence(project_id, sentence_id):
        return jsonify({"error": "Sentence not in timeline"}), 404

    timeline = timeline_ops.toggle_word_excluded(
        _projects[project_id].state.timeline, sentence_id, word_id
    )
    return jsonify(_segments_payload(_update_timeline(project_id, timeline)))


@bp.route("/api/projects/<project_id>/entries/<sentence_id>/override", methods=["POST"])
def set_override(project_id: str, sentence_id: str):
    if project_id not in _projects:
        return jsonify({"error": "Project not found"}), 404
    if not _known_sentence(project_id, sentence_id):
        return jsonify({"error": "Sentence not in timeline"}), 404

    # An explicit JSON null clears the override; anything unparseable is rejected.
    body = request.get_json(silent=True)
    if body is None and request.get_data(as_text=True).strip() != "null":
        return jsonify({"error": "Request body must be JSON"}), 400
    try:
        override = parse_video_override(body)
    except (ValueError, TypeError) as e:
        return jsonify({"error": str(e)}), 400

    timeline = timeline_ops.set_video_override(
        _projects[project_id].state.timeline, sentence_id, override
    )
    return jsonify(_segments_payload(_update_timeline(project_id, timeline)))
