"""
Local maintenance CLI for support and administration.

Usage:
  python -m resticapi.tools.maintenance config-check
  python -m resticapi.tools.maintenance stats
  python -m resticapi.tools.maintenance snapshots
  python -m resticapi.tools.maintenance logs [--file resticapi-2026-10-19.log]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import shutil
import sys
from pathlib import Path
from typing import Any, Optional

from resticapi.core.errors import ConfigError, ResticApiError
from resticapi.core.results import InvocationRequest
from resticapi.core.session import RepositorySession
from resticapi.models.schemas import AppConfig
from resticapi.services.operations import REDACTED, execute_operation, snapshots_request, stats_request
from resticapi.services.restic import ResticService
from resticapi.utils.config_store import load_config
from resticapi.utils.logger import get_log_files, get_logger, read_log_file
from resticapi.utils.paths import runtime_paths_info

logger = get_logger("MaintenanceCLI")


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _load(config_path: Optional[str]) -> AppConfig:
    return load_config(Path(config_path) if config_path else None)


def cmd_config_check(args: argparse.Namespace) -> int:
    try:
        config = _load(args.config)
    except ConfigError as ex:
        print(f"Error: {ex.message}", file=sys.stderr)
        return 2
    _print_json({
        "ok": True,
        "repository": {"location": config.repository.location, "password": REDACTED},
        "server": {"ip": config.server.ip, "port": config.server.port},
        "restic": {
            "binary": config.restic.binary,
            "resolved": shutil.which(config.restic.binary),
            "timeoutSeconds": config.restic.timeout_seconds,
        },
        "paths": runtime_paths_info(),
    })
    return 0


def _run_once(config: AppConfig, request: InvocationRequest) -> Any:
    session = RepositorySession(config.repository)
    service = ResticService.from_config(config.restic)
    outcome = asyncio.run(execute_operation(session, service, request))
    return outcome.unwrap()


def _cmd_query(args: argparse.Namespace, request: InvocationRequest) -> int:
    try:
        config = _load(args.config)
    except ConfigError as ex:
        print(f"Error: {ex.message}", file=sys.stderr)
        return 2
    try:
        _print_json(_run_once(config, request))
    except ResticApiError as ex:
        print(f"Error: {ex.message}", file=sys.stderr)
        return 1
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    return _cmd_query(args, stats_request())


def cmd_snapshots(args: argparse.Namespace) -> int:
    return _cmd_query(args, snapshots_request())


def cmd_logs(args: argparse.Namespace) -> int:
    if not args.file:
        _print_json({"ok": True, "files": get_log_files()})
        return 0
    content = read_log_file(args.file)
    if content is None:
        print(f"Error: log file not found: {args.file}", file=sys.stderr)
        return 2
    sys.stdout.write(content)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="python -m resticapi.tools.maintenance",
        description="Local maintenance tool for ResticAPI.",
    )
    p.add_argument("--config", help="Path to config.toml (defaults to ~/.config/resticapi/config.toml).")
    sub = p.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("config-check", help="Validate the configuration and show the effective values")
    p_check.set_defaults(func=cmd_config_check)

    p_stats = sub.add_parser("stats", help="Print repository statistics")
    p_stats.set_defaults(func=cmd_stats)

    p_snapshots = sub.add_parser("snapshots", help="Print the snapshot list")
    p_snapshots.set_defaults(func=cmd_snapshots)

    p_logs = sub.add_parser("logs", help="List log files, or print one with --file")
    p_logs.add_argument("--file", help="Log file name as listed by `logs`.")
    p_logs.set_defaults(func=cmd_logs)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
