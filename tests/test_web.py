"""Unit tests for the TextCut HTTP API."""

import json
from pathlib import Path

import pytest

from textcut.web import create_app


@pytest.fixture
def app():
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def project_doc(sample_project_path: Path) -> dict:
    return json.loads(sample_project_path.read_text())


@pytest.fixture
def project_id(client, project_doc) -> str:
    resp = client.post("/api/projects", json=project_doc)
    assert resp.status_code == 201
    return resp.get_json()["project_id"]


class TestStatelessSegments:
    def test_computes_segments(self, client, project_doc):
        resp = client.post("/api/segments", json=project_doc)
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["fps"] == 30
        assert len(data["segments"]) == 3
        assert data["total_frames"] == 57
        assert data["segments"][1]["start_frame"] == 18

    def test_non_json_body(self, client):
        resp = client.post("/api/segments", data="nope", content_type="text/plain")
        assert resp.status_code == 400

    def test_invalid_project(self, client):
        resp = client.post("/api/segments", json={"sources": []})
        assert resp.status_code == 400
        assert "must contain" in resp.get_json()["error"]

    def test_empty_timeline(self, client, project_doc):
        project_doc["timeline"] = []
        data = client.post("/api/segments", json=project_doc).get_json()
        assert data["segments"] == []
        assert data["total_frames"] == 1


class TestProjects:
    def test_get_segments(self, client, project_id):
        resp = client.get(f"/api/projects/{project_id}/segments")
        assert resp.status_code == 200
        assert len(resp.get_json()["segments"]) == 3

    def test_unknown_project(self, client):
        assert client.get("/api/projects/nonexistent/segments").status_code == 404
        assert client.get("/api/projects/nonexistent/export").status_code == 404

    def test_segment_at_frame(self, client, project_id):
        data = client.get(f"/api/projects/{project_id}/segments/at/20").get_json()
        assert data["segment"]["id"] == "segment-1"
        assert data["source_time"] == pytest.approx(0.8 + 2 / 30)

    def test_segment_at_frame_outside(self, client, project_id):
        data = client.get(f"/api/projects/{project_id}/segments/at/500").get_json()
        assert data["segment"] is None

    def test_export(self, client, project_id):
        resp = client.get(f"/api/projects/{project_id}/export")
        cuts = resp.get_json()["cuts"]
        assert cuts[0] == {"sourcePath": "media/interview.mp4", "startTime": 0.0, "endTime": 0.6}
        assert len(cuts) == 3


class TestEdits:
    def test_restore_word_merges_sentence(self, client, project_id):
        resp = client.post(f"/api/projects/{project_id}/entries/sentence-0/words/w2/toggle")
        assert resp.status_code == 200
        segments = resp.get_json()["segments"]
        # no deletions left: both sentences play through as one segment
        assert len(segments) == 1
        assert segments[0]["sentence_ids"] == ["sentence-0", "sentence-1"]

    def test_exclude_sentence(self, client, project_id):
        resp = client.post(
            f"/api/projects/{project_id}/entries/sentence-1/excluded", json={"excluded": True}
        )
        assert len(resp.get_json()["segments"]) == 2
        stored = client.get(f"/api/projects/{project_id}/segments").get_json()
        assert len(stored["segments"]) == 2

    def test_exclude_requires_flag(self, client, project_id):
        resp = client.post(f"/api/projects/{project_id}/entries/sentence-1/excluded", json={})
        assert resp.status_code == 400

    def test_unknown_sentence(self, client, project_id):
        resp = client.post(
            f"/api/projects/{project_id}/entries/ghost/excluded", json={"excluded": True}
        )
        assert resp.status_code == 404

    def test_reorder(self, client, project_id):
        resp = client.post(
            f"/api/projects/{project_id}/entries/reorder", json={"from_index": 1, "to_index": 0}
        )
        segments = resp.get_json()["segments"]
        assert segments[0]["sentence_ids"] == ["sentence-1"]
        assert segments[0]["start_frame"] == 0

    def test_reorder_bad_index(self, client, project_id):
        resp = client.post(
            f"/api/projects/{project_id}/entries/reorder", json={"from_index": 9, "to_index": 0}
        )
        assert resp.status_code == 400

    def test_set_and_clear_override(self, client, project_id):
        url = f"/api/projects/{project_id}/entries/sentence-1/override"
        data = client.post(url, json={"source_id": "B", "start": 5.0, "end": 9.0}).get_json()
        broll = data["segments"][-1]
        assert broll["source_id"] == "B"
        assert broll["audio_source_id"] == "A"
        assert broll["duration_frames"] == 27

        data = client.post(url, data="null", content_type="application/json").get_json()
        assert "audio_source_id" not in data["segments"][-1]

    def test_bad_override(self, client, project_id):
        url = f"/api/projects/{project_id}/entries/sentence-1/override"
        resp = client.post(url, json={"source_id": "B"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("body", ["{not json", ""])
    def test_malformed_override_keeps_existing(self, client, project_id, body):
        url = f"/api/projects/{project_id}/entries/sentence-1/override"
        client.post(url, json={"source_id": "B", "start": 5.0, "end": 9.0})

        resp = client.post(url, data=body, content_type="application/json")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Request body must be JSON"

        stored = client.get(f"/api/projects/{project_id}/segments").get_json()
        assert stored["segments"][-1]["audio_source_id"] == "A"
