#!/usr/bin/env python3
"""
Stockroom management CLI.

Usage:
    python manage.py serve       Start the API server
    python manage.py migrate     Apply pending database migrations
    python manage.py status      Show migration status (--verify for integrity checks)
"""

import argparse
import asyncio
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent


def cmd_serve(args: argparse.Namespace) -> None:
    """Start uvicorn against the application factory module."""
    import uvicorn

    print(f"Starting server on {args.host}:{args.port}...")
    uvicorn.run(
        "stockroom.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=None if args.reload else args.workers,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations."""
    from stockroom.config import configure_logging
    from stockroom.infrastructure.storage.sqlite.migrations import initialize_database

    configure_logging()
    results = asyncio.run(initialize_database(create_backup_before=not args.no_backup))

    if not results:
        print("Database is up to date.")
        return

    for result in results:
        marker = "OK" if result.success else "FAILED"
        print(f"  v{result.version} {result.name}: {marker} ({result.execution_time_ms} ms)")
        if result.error:
            print(f"    {result.error}")

    if not all(r.success for r in results):
        sys.exit(1)


def cmd_status(args: argparse.Namespace) -> None:
    """Print migration status and, optionally, schema integrity checks."""
    from stockroom.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        verify_schema_integrity,
    )

    status = asyncio.run(get_migration_status())
    if not status["exists"]:
        print("Database does not exist yet. Run 'migrate' first.")
        print(f"  Pending: {', '.join(status['pending_migrations']) or 'none'}")
        return

    print(f"Current version: {status['current_version']}")
    print(f"  Applied: {', '.join(status['applied_migrations']) or 'none'}")
    print(f"  Pending: {', '.join(status['pending_migrations']) or 'none'}")

    if args.verify:
        failed = False
        for check in asyncio.run(verify_schema_integrity()):
            print(f"  {check['check']}: {check['status']}")
            failed = failed or check["status"] != "PASS"
        if failed:
            sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stockroom management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.add_argument("--workers", type=int, default=1, help="Number of uvicorn workers")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending migrations")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.add_argument("--verify", action="store_true", help="Run schema integrity checks")
    p_status.set_defaults(func=cmd_status)

    args = parser.parse_args()
    if str(ROOT_DIR) not in sys.path:
        sys.path.insert(0, str(ROOT_DIR))
    args.func(args)


if __name__ == "__main__":
    main()
