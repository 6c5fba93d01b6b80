"""Thin CLI entry point — loads a project and calls the engine."""

import argparse
import json
import logging
import sys
from pathlib import Path

from textcut.editors.export import cuts_to_dicts
from textcut.engine import process
from textcut.manifest import load_manifest, segment_to_dict
from textcut.timecode import format_frames


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="textcut",
        description="TextCut — transcript-driven timeline segmentation.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    seg = sub.add_parser("segments", help="Print the playback segments of a project")
    seg.add_argument("project", type=Path, help="Path to a JSON project file")
    seg.add_argument("--json", action="store_true", help="Emit segments as JSON")
    seg.add_argument("--probe", action="store_true", help="Probe sources for missing dimensions")

    cuts = sub.add_parser("cuts", help="Write the export cut list of a project")
    cuts.add_argument("project", type=Path, help="Path to a JSON project file")
    cuts.add_argument("--output", "-o", type=Path, help="Output JSON file (default: stdout)")

    serve = sub.add_parser("serve", help="Launch the HTTP API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from textcut.web import create_app
        app = create_app()
        print(f"TextCut API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    try:
        manifest = load_manifest(args.project)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "segments":
        manifest.probe_sources = manifest.probe_sources or args.probe
        result = process(manifest)
        if args.json:
            print(json.dumps({
                "total_frames": result.total_frames,
                "segments": [segment_to_dict(s) for s in result.segments],
            }, indent=2))
            return
        if not result.segments:
            print("No segments to preview")
            return
        for s in result.segments:
            audio = f"  (audio: {s.audio_source_id})" if s.has_distinct_audio else ""
            print(
                f"  {format_frames(s.start_frame):>6}  {s.source_id} "
                f"[{s.source_start:.2f}-{s.source_end:.2f}] "
                f"{s.duration_frames}f{audio}  {s.text}"
            )
        print()
        print(f"  {len(result.segments)} segments, {format_frames(result.total_frames)} total")
        if result.entries_skipped:
            print(f"  Skipped entries: {result.entries_skipped}")
        return

    if args.command == "cuts":
        result = process(manifest)
        if not result.cuts:
            print("Error: no segments to export", file=sys.stderr)
            sys.exit(1)
        payload = json.dumps(cuts_to_dicts(result.cuts), indent=2)
        if args.output:
            args.output.write_text(payload, encoding="utf-8")
            print(f"Wrote {len(result.cuts)} cuts to {args.output}")
        else:
            print(payload)
