"""Command-line interface for care planning: timetables, staff allocation, progress."""

from __future__ import annotations

import argparse
from datetime import date as _date

from careplan.config import CarePlanConfig, load_config
from careplan.domain.db import init_database, session_scope
from careplan.domain.models import ActivityTemplate, Child, ProgressLog, Staff
from careplan.domain.repositories import (
    ActivityTemplateRepository,
    ChildRepository,
    ProgressLogRepository,
    StaffRepository,
    TimetableRepository,
)
from careplan.domain.values import TimeWindow
from careplan.engine.orchestrator import Orchestrator, summarize_allocations
from careplan.io.export_csv import export_allocations_csv, export_progress_csv, export_timetable_csv
from careplan.io.import_csv import import_children_csv, import_staff_csv, import_templates_csv
from careplan.narrative import (
    FRESH,
    NarrativeClient,
    SessionCache,
    child_payload,
    day_summary_payload,
    mapping_context_payload,
    progress_log_payload,
    timetable_payload,
)
from careplan.services.constraints import validate_engagement, validate_template_duration, validate_window


def _config(args: argparse.Namespace) -> CarePlanConfig:
    return load_config(args.config)


def _db_url(args: argparse.Namespace, cfg: CarePlanConfig) -> str:
    return args.db or cfg.db_url


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    db_url = _db_url(args, _config(args))
    init_database(db_url)
    print(f"[OK] Database initialized: {db_url}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database."""
    with session_scope(_db_url(args, _config(args))) as session:
        try:
            if args.children:
                count = import_children_csv(session, args.children)
                print(f"[OK] Imported {count} children")
            if args.staff:
                count = import_staff_csv(session, args.staff)
                print(f"[OK] Imported {count} staff")
            if args.templates:
                count = import_templates_csv(session, args.templates)
                print(f"[OK] Imported {count} activity templates")
        except Exception as e:
            print(f"[ERROR] Import failed: {e}")
            raise


def _cmd_add_child(args: argparse.Namespace) -> None:
    with session_scope(_db_url(args, _config(args))) as session:
        child = ChildRepository.create(session, Child(name=args.name, birth_date=args.birth_date, notes=args.notes))
        print(f"[OK] Added child {child.id}: {child.name}")


def _cmd_add_staff(args: argparse.Namespace) -> None:
    with session_scope(_db_url(args, _config(args))) as session:
        staff = StaffRepository.create(session, Staff(name=args.name, role=args.role))
        print(f"[OK] Added staff {staff.id}: {staff.name} ({staff.role})")


def _cmd_add_template(args: argparse.Namespace) -> None:
    duration = validate_template_duration(args.duration)
    with session_scope(_db_url(args, _config(args))) as session:
        template = ActivityTemplateRepository.create(
            session, ActivityTemplate(title=args.title, duration_mins=duration, description=args.description)
        )
        print(f"[OK] Added template {template.id}: {template.title} ({template.duration_mins} mins)")


def _cmd_plan(args: argparse.Namespace) -> None:
    """Generate and save a child's timetable for a date."""
    cfg = _config(args)
    window = validate_window(
        TimeWindow(start=args.start or cfg.default_window.start, end=args.end or cfg.default_window.end)
    )
    with session_scope(_db_url(args, cfg)) as session:
        try:
            blocks = Orchestrator(cfg.max_blocks).plan_child_day(
                session, args.child, args.date, window, persist=not args.dry_run
            )
        except Exception as e:
            print(f"[ERROR] Planning failed: {e}")
            raise
        if not blocks:
            print("No blocks fit in the window.")
        for block in blocks:
            print(f"  {block.start}-{block.end}  {block.activity}")


def _cmd_allocate(args: argparse.Namespace) -> None:
    """Assign staff to all timetable blocks on a date."""
    cfg = _config(args)
    with session_scope(_db_url(args, cfg)) as session:
        try:
            allocations = Orchestrator(cfg.max_blocks).allocate_day(session, args.date, persist=not args.dry_run)
        except Exception as e:
            print(f"[ERROR] Allocation failed: {e}")
            raise
        print(summarize_allocations(allocations))


def _cmd_log_progress(args: argparse.Namespace) -> None:
    engagement = validate_engagement(args.engagement)
    with session_scope(_db_url(args, _config(args))) as session:
        if ChildRepository.get_by_id(session, args.child) is None:
            raise SystemExit(f"[ERROR] Child {args.child} not found")
        log = ProgressLogRepository.create(
            session,
            ProgressLog(
                child_id=args.child,
                date=args.date,
                completed=args.completed,
                engagement=engagement,
                notes=args.notes,
            ),
        )
        print(f"[OK] Logged progress {log.id} for child {args.child} on {args.date}")


def _cmd_export(args: argparse.Namespace) -> None:
    """Export data from database to CSV."""
    with session_scope(_db_url(args, _config(args))) as session:
        if args.timetable:
            count = export_timetable_csv(session, args.timetable, day=args.date)
            print(f"[OK] Exported {count} timetable entries to {args.timetable}")
        if args.allocations:
            count = export_allocations_csv(session, args.allocations, day=args.date)
            print(f"[OK] Exported {count} allocations to {args.allocations}")
        if args.progress:
            count = export_progress_csv(session, args.progress, child_id=args.child)
            print(f"[OK] Exported {count} progress logs to {args.progress}")


def _cmd_narrative(args: argparse.Namespace) -> None:
    """Request narrative text (falls back to cached or offline text)."""
    cfg = _config(args)
    with session_scope(_db_url(args, cfg)) as session:
        client = NarrativeClient(
            base_url=cfg.narrative.base_url,
            cache=SessionCache(session),
            timeout=cfg.narrative.timeout_seconds,
            enabled=cfg.narrative.enabled,
        )

        child = None
        if args.kind != "mapping":
            if args.child is None:
                raise SystemExit(f"[ERROR] --child is required for {args.kind}")
            child = ChildRepository.get_by_id(session, args.child)
            if child is None:
                raise SystemExit(f"[ERROR] Child {args.child} not found")

        if args.kind == "mapping":
            entries = sorted(TimetableRepository.get_by_date(session, args.date), key=lambda e: e.start)
            context = mapping_context_payload(args.date, StaffRepository.get_all(session), entries)
            result = client.micro_coach(context)
        elif args.kind == "summary":
            logs = ProgressLogRepository.get_for_child(session, child.id, args.date)
            result = client.summarize(child_payload(child), day_summary_payload(args.date, logs))
        elif args.kind == "coach":
            logs = ProgressLogRepository.get_for_child(session, child.id, args.date)
            last = progress_log_payload(logs[-1]) if logs else None
            result = client.micro_coach({"date": args.date, "lastLog": last})
        elif args.kind == "rationale":
            entries = TimetableRepository.get_for_child(session, child.id, args.date)
            result = client.timetable_rationale(timetable_payload(args.date, entries), child_payload(child))
        else:
            logs = ProgressLogRepository.get_recent(session, child.id, limit=20)
            result = client.weekly_insights([progress_log_payload(log) for log in logs], audience=args.audience)

        if not result.ok:
            raise SystemExit(f"[ERROR] Narrative unavailable: {result.error}")
        if result.source != FRESH:
            print(f"[WARN] Showing {result.source} text ({result.error})")
        print(result.text)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(prog="careplan", description="Care planning for autism-support programs")
    parser.add_argument("--db", help="Database URL (default from config: sqlite:///careplan.db)")
    parser.add_argument("--config", help="Path to config YAML/JSON (optional)")

    sub = parser.add_subparsers(dest="command", required=True)
    today = _date.today().isoformat()

    init = sub.add_parser("init-db", help="Initialize database")
    init.set_defaults(func=_cmd_init_db)

    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--children", help="Path to children CSV")
    imp.add_argument("--staff", help="Path to staff CSV")
    imp.add_argument("--templates", help="Path to activity templates CSV")
    imp.set_defaults(func=_cmd_import_csv)

    ac = sub.add_parser("add-child", help="Add a child profile")
    ac.add_argument("name")
    ac.add_argument("--birth-date", dest="birth_date")
    ac.add_argument("--notes")
    ac.set_defaults(func=_cmd_add_child)

    ast = sub.add_parser("add-staff", help="Add a staff member")
    ast.add_argument("name")
    ast.add_argument("--role", default="Therapist")
    ast.set_defaults(func=_cmd_add_staff)

    at = sub.add_parser("add-template", help="Add an activity template")
    at.add_argument("title")
    at.add_argument("--duration", type=int, default=30, help="Duration in minutes")
    at.add_argument("--description")
    at.set_defaults(func=_cmd_add_template)

    plan = sub.add_parser("plan", help="Generate a child's timetable for a date")
    plan.add_argument("--child", type=int, required=True)
    plan.add_argument("--date", default=today, help="YYYY-MM-DD (default: today)")
    plan.add_argument("--start", help="Window start HH:MM")
    plan.add_argument("--end", help="Window end HH:MM")
    plan.add_argument("--dry-run", action="store_true", help="Do not save the timetable")
    plan.set_defaults(func=_cmd_plan)

    alloc = sub.add_parser("allocate", help="Assign staff to all blocks on a date")
    alloc.add_argument("--date", default=today)
    alloc.add_argument("--dry-run", action="store_true", help="Do not save allocations")
    alloc.set_defaults(func=_cmd_allocate)

    lp = sub.add_parser("log-progress", help="Record a progress log")
    lp.add_argument("--child", type=int, required=True)
    lp.add_argument("--date", default=today)
    lp.add_argument("--engagement", type=int, required=True, help="0-10")
    lp.add_argument("--completed", action="store_true")
    lp.add_argument("--notes")
    lp.set_defaults(func=_cmd_log_progress)

    exp = sub.add_parser("export", help="Export data from database to CSV")
    exp.add_argument("--timetable", help="Path to export timetable CSV")
    exp.add_argument("--allocations", help="Path to export allocations CSV")
    exp.add_argument("--progress", help="Path to export progress logs CSV")
    exp.add_argument("--date", help="Restrict timetable/allocations to a date")
    exp.add_argument("--child", type=int, help="Restrict progress logs to a child")
    exp.set_defaults(func=_cmd_export)

    nar = sub.add_parser("narrative", help="Generate narrative text for a child or a day's staff mapping")
    nar.add_argument("kind", choices=["summary", "coach", "rationale", "weekly", "mapping"])
    nar.add_argument("--child", type=int, help="Child id (not used by mapping)")
    nar.add_argument("--date", default=today)
    nar.add_argument("--audience", default="Teacher/Parent/Doctor")
    nar.set_defaults(func=_cmd_narrative)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
