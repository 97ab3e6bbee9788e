from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable
from pathlib import Path

from cull import __version__
from cull.audit import AuditLog
from cull.config import CullConfig, load_config
from cull.errors import CullError
from cull.host import JsonCatalog
from cull.models import RunStatus
from cull.session import Confirmation, DeletionController

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="cull",
        description=(
            "Report and permanently delete rejected images (rating -1) listed in a "
            "catalog, together with their sidecar files. Delete mode requires --yes."
        ),
    )
    parser.add_argument("--catalog", required=True, help="JSON catalog of the collection")
    parser.add_argument("--config", default=None, help="Optional JSON config (flags override)")
    parser.add_argument("--log-file", default=None, help="Audit log destination")
    parser.add_argument(
        "--sidecar-ext",
        action="append",
        default=[],
        help="Sidecar extension to look for (repeatable, replaces the configured set)",
    )
    parser.add_argument(
        "--progress-interval",
        type=int,
        default=None,
        help="Print progress every N images during deletion",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--info", action="store_true", help="Show collection and rejected counts")
    mode.add_argument("--dry-run", action="store_true", help="Report reclaimable space (default)")
    mode.add_argument("--delete", action="store_true", help="Permanently delete rejected images")
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm permanent deletion (required with --delete)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    catalog_path = Path(args.catalog).resolve()
    if not catalog_path.is_file():
        raise SystemExit(f"Catalog does not exist or is not a file: {catalog_path}")

    try:
        config = _effective_config(args)
        controller = _build_controller(catalog_path, config)
        if args.info:
            print(f"Collection: {controller.info()}")
            print(f"Log: {config.resolved_log_path}")
            return int(RunStatus.SUCCEEDED)
        if args.delete:
            confirmation = Confirmation()
            if args.yes:
                confirmation.arm()
            return int(controller.delete_permanently(confirmation).status)
        report = controller.check_space()
    except CullError as exc:
        raise SystemExit(str(exc)) from exc
    return int(RunStatus.NO_CANDIDATES if report.file_count == 0 else RunStatus.SUCCEEDED)


def _effective_config(args: argparse.Namespace) -> CullConfig:
    config = load_config(Path(args.config) if args.config else None)
    return config.with_overrides(
        log_path=args.log_file,
        sidecar_extensions=args.sidecar_ext,
        progress_interval=args.progress_interval,
    )


def _build_controller(catalog_path: Path, config: CullConfig) -> DeletionController:
    catalog = JsonCatalog(catalog_path)
    return DeletionController(
        source=catalog,
        records=catalog,
        audit_log=AuditLog(config.resolved_log_path),
        extensions=config.sidecar_extensions,
        progress_interval=config.progress_interval,
    )


if __name__ == "__main__":
    raise SystemExit(main())
