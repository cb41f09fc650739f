#!/usr/bin/env python3
"""
Faktura management CLI.

Usage:
    python manage.py serve                      Start the API server
    python manage.py migrate                    Apply pending database migrations
    python manage.py migrate --status           Show migrations and schema integrity checks
    python manage.py import-calculation FILE    Print invoice lines for an export file
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from faktura.config import configure_logging, get_settings


def cmd_serve(args: argparse.Namespace) -> None:
    """Run uvicorn in the foreground."""
    import uvicorn

    settings = get_settings()
    host = args.host or settings.api.host
    port = args.port or settings.api.port

    print(f"Starting server on {host}:{port}...")
    uvicorn.run(
        "faktura.api.main:app",
        host=host,
        port=port,
        reload=args.reload,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply migrations, or only report their status."""
    from faktura.infrastructure.storage.sqlite.migrations.migrator import (
        get_migration_status,
        initialize_database,
        verify_schema_integrity,
    )

    configure_logging()
    db_path = Path(args.db) if args.db else None

    if args.status:
        status = asyncio.run(get_migration_status(db_path))
        if status["exists"]:
            status["integrity_checks"] = asyncio.run(verify_schema_integrity(db_path))
        print(json.dumps(status, indent=2))
        if any(c["status"] == "FAIL" for c in status.get("integrity_checks", [])):
            sys.exit(1)
        return

    results = asyncio.run(initialize_database(db_path))
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        mark = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  {result.version} {result.name} ({result.execution_time_ms} ms) {mark}")

    if not all(r.success for r in results):
        sys.exit(1)


def cmd_import_calculation(args: argparse.Namespace) -> None:
    """Parse an export file and print the resulting lines and totals as JSON."""
    from faktura.application.use_cases import ImportCalculationUseCase
    from faktura.core.exceptions import CalculationImportError

    path = Path(args.file)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        sys.exit(1)

    use_case = ImportCalculationUseCase()
    try:
        imported = use_case.execute(payload)
    except CalculationImportError as e:
        print(e.message, file=sys.stderr)
        sys.exit(2)

    print(use_case.to_response(imported).model_dump_json(indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Faktura management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply database migrations")
    p_migrate.add_argument("--db", default=None, help="Database file (default from settings)")
    p_migrate.add_argument(
        "--status", action="store_true", help="Only show migration status and integrity checks"
    )
    p_migrate.set_defaults(func=cmd_migrate)

    # import-calculation
    p_import = sub.add_parser("import-calculation", help="Convert a calculation export file")
    p_import.add_argument("file", help="Path to the JSON export")
    p_import.set_defaults(func=cmd_import_calculation)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
