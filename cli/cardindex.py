"""cardindex CLI — validate manifests and query the audit log."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Ensure project root is importable when running as script
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate a cardindex.yaml manifest."""
    from runtime.manifest_loader import load_manifest

    path = args.manifest
    try:
        manifest = load_manifest(path)
    except FileNotFoundError:
        print(f"Error: manifest not found: {path}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        print(f"Error: invalid manifest: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Manifest OK: {manifest.app.name} v{manifest.app.version}")
    print(f"  Qdrant URL:   {manifest.qdrant.url}")
    print(f"  Collection:   {manifest.index.collection}")
    print(f"  Page size:    {manifest.index.page_size}")
    if manifest.audit.enabled:
        print(f"  Audit path:   {manifest.audit.path}")
    else:
        print("  Audit path:   (disabled)")


def _describe(record: dict) -> str:
    """One-line summary of an entry's detail, by event type."""
    detail = record.get("detail", {})
    event = record["event"]
    if event == "index.error":
        text = f"{detail.get('operation', '?')} {detail.get('kind', '?')}: {detail.get('error', '')}"
        if "cause" in detail:
            text += f" ({detail['cause']})"
        return text
    if event == "point.insert":
        authors = ",".join(detail.get("authors", []))
        return f"{detail.get('visibility', '?')} authors=[{authors}]"
    if event == "point.visibility":
        state = "changed" if detail.get("changed") else "unchanged"
        return f"-> {detail.get('requested', '?')} {state}"
    if event == "index.search":
        return f"page={detail.get('page')} results={detail.get('count')}/{detail.get('hits')}"
    return json.dumps(detail)


def cmd_logs(args: argparse.Namespace) -> None:
    """Show index operations recorded in the audit log."""
    from contracts.audit import AuditEvent
    from runtime.audit.logger import JsonlAuditLogger

    if not Path(args.log_path).exists():
        print(f"No audit log found at {args.log_path}", file=sys.stderr)
        sys.exit(1)

    event = None
    if args.errors:
        event = AuditEvent.INDEX_ERROR
    elif args.event:
        try:
            event = AuditEvent(args.event)
        except ValueError:
            valid = ", ".join(e.value for e in AuditEvent)
            print(f"Unknown event type: {args.event}", file=sys.stderr)
            print(f"Valid events: {valid}", file=sys.stderr)
            sys.exit(1)

    try:
        since = datetime.fromisoformat(args.since) if args.since else None
        until = datetime.fromisoformat(args.until) if args.until else None
    except ValueError as exc:
        print(f"Invalid timestamp: {exc}", file=sys.stderr)
        sys.exit(1)

    logger = JsonlAuditLogger(args.log_path)
    entries = logger.select(
        event=event,
        point_id=args.point_id,
        collection=args.collection,
        since=_as_utc(since),
        until=_as_utc(until),
    )[-args.limit:]

    if not entries:
        print("No matching audit entries.")
        return

    for entry in entries:
        record = json.loads(entry.model_dump_json())
        if args.json:
            print(json.dumps(record))
            continue
        ts = record["ts"][:19]
        pid = (record.get("point_id") or "-")[:8]
        print(f"{ts}  {record['event']:16s}  {record['collection']:14s}  {pid:8s}  {_describe(record)}")


def _as_utc(value: datetime | None) -> datetime | None:
    # Entries are stored with UTC timestamps; naive input is read as UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="cardindex",
        description="cardindex — visibility-tagged card index tooling",
    )
    sub = parser.add_subparsers(dest="command")

    # validate
    p_val = sub.add_parser("validate", help="Validate a cardindex.yaml manifest")
    p_val.add_argument(
        "manifest", nargs="?", default="cardindex.yaml", help="Path to manifest"
    )
    p_val.set_defaults(func=cmd_validate)

    # logs
    p_logs = sub.add_parser("logs", help="Show recorded index operations")
    p_logs.add_argument("log_path", help="Path to audit JSONL file")
    p_logs.add_argument("--point-id", "-p", help="Filter by point id")
    p_logs.add_argument("--event", "-e", help="Filter by event type")
    p_logs.add_argument("--errors", action="store_true", help="Only index.error entries")
    p_logs.add_argument("--collection", "-c", help="Filter by collection")
    p_logs.add_argument("--since", help="ISO timestamp, inclusive")
    p_logs.add_argument("--until", help="ISO timestamp, inclusive")
    p_logs.add_argument("--limit", "-n", type=int, default=20, help="Max entries")
    p_logs.add_argument("--json", action="store_true", help="Output raw JSON")
    p_logs.set_defaults(func=cmd_logs)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
