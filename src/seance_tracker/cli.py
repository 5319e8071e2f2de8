#!/usr/bin/env python3
"""
Seance Tracker CLI.

Usage:
    seance-tracker serve --port 8000
    seance-tracker close-expired            # Close every goal whose period has ended
    seance-tracker close-expired --dry-run  # Only list them
"""

import argparse
import logging
import sys

from rich.console import Console
from rich.table import Table
from rich import box

from .config import get_settings
from .db.repositories.goal_repository import GoalRepository
from .db.repositories.session_repository import SessionRepository
from .services.goal_service import GoalService
from .utils.dates import to_iso

console = Console()


def _goal_service(args) -> GoalService:
    settings = get_settings()
    db_path = args.db or settings.database_path
    return GoalService(
        GoalRepository(db_path, timeout=settings.database_timeout_sec),
        SessionRepository(db_path, timeout=settings.database_timeout_sec),
    )


def cmd_serve(args) -> int:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "seance_tracker.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_close_expired(args) -> int:
    """Close (or list, with --dry-run) the goals whose end date has passed."""
    service = _goal_service(args)
    expired = service.find_expired()

    if not expired:
        console.print("[green]No expired active goals.[/green]")
        return 0

    table = Table(title="Expired active goals", box=box.ROUNDED)
    table.add_column("Goal", style="cyan")
    table.add_column("User")
    table.add_column("Type")
    table.add_column("Target", justify="right")
    table.add_column("Ended")
    for goal in expired:
        table.add_row(
            goal.id,
            goal.user_id,
            f"{goal.seance_type.label} / {goal.goal_type.name.lower()}",
            str(goal.goal_value),
            to_iso(goal.end_date),
        )
    console.print(table)

    if args.dry_run:
        console.print(f"[yellow]Dry run: {len(expired)} goal(s) left open.[/yellow]")
        return 0

    closed = service.close_expired_goals()
    console.print(f"[bold green]Closed {closed} goal(s).[/bold green]")
    return 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Seance Tracker - workout sessions, goals and statistics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  seance-tracker serve --port 8000
  seance-tracker close-expired --dry-run
        """,
    )
    parser.add_argument("--db", type=str, help="SQLite database path (default: settings)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_p = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_p.add_argument("--host", type=str, help="Bind address")
    serve_p.add_argument("--port", "-p", type=int, help="Port")
    serve_p.add_argument("--reload", action="store_true", help="Reload on code changes")

    close_p = subparsers.add_parser(
        "close-expired", help="Close every active goal whose end date has passed"
    )
    close_p.add_argument(
        "--dry-run", action="store_true", help="List the goals without closing them"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "close-expired":
        return cmd_close_expired(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
