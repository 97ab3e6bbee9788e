from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence

from cull.audit import AuditLog
from cull.files import DEFAULT_SIDECAR_EXTENSIONS, file_size, sidecar_files
from cull.host import RecordStore
from cull.models import Asset, DeletionOutcome, DryRunReport, SessionReport

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 10


def audit_space(
    candidates: Sequence[Asset],
    audit_log: AuditLog,
    extensions: Iterable[str] = DEFAULT_SIDECAR_EXTENSIONS,
) -> DryRunReport:
    """Measure the primaries and sidecars of ``candidates`` without touching them."""
    extensions = tuple(extensions)
    if not candidates:
        report = DryRunReport(file_count=0, sidecar_count=0, total_bytes=0)
    else:
        total_bytes = 0
        sidecar_count = 0
        for asset in candidates:
            total_bytes += file_size(asset.path)
            sidecars = sidecar_files(asset.path, extensions)
            sidecar_count += len(sidecars)
            total_bytes += sum(file_size(path) for path in sidecars)
        report = DryRunReport(
            file_count=len(candidates),
            sidecar_count=sidecar_count,
            total_bytes=total_bytes,
        )

    message = report.render()
    print(message)
    audit_log.append("Dry run: " + message.replace("\n", " "))
    return report


def perform_deletion(
    candidates: Sequence[Asset],
    records: RecordStore,
    audit_log: AuditLog,
    extensions: Iterable[str] = DEFAULT_SIDECAR_EXTENSIONS,
    progress_interval: int = PROGRESS_INTERVAL,
) -> SessionReport:
    """Delete every candidate, its sidecars and its host record, in order.

    Failures are recorded per file and never stop the batch. Callers are
    responsible for confirmation and for allowing only one run at a time.
    """
    extensions = tuple(extensions)
    total = len(candidates)
    audit_log.append(f"Starting deletion session for {total} images.")
    print("Deleting images... please wait.")

    outcomes: list[DeletionOutcome] = []
    for index, asset in enumerate(candidates, start=1):
        outcomes.append(_delete_asset(asset, records, audit_log, extensions))
        if index % progress_interval == 0:
            print(f"Progress: {index}/{total} images processed...")

    report = SessionReport.from_outcomes(total, outcomes)
    summary = report.render()
    audit_log.append("End of session. " + summary.replace("\n", " "))
    print(summary)
    return report


def _delete_asset(
    asset: Asset,
    records: RecordStore,
    audit_log: AuditLog,
    extensions: tuple[str, ...],
) -> DeletionOutcome:
    primary = asset.path
    size = file_size(primary)
    try:
        os.remove(primary)
    except (OSError, ValueError) as exc:
        reason = getattr(exc, "strerror", None) or str(exc)
        audit_log.append(f"ERROR: Failed to delete {primary} - {reason}")
        return DeletionOutcome(primary_path=primary, primary_deleted=False, error=reason)

    reclaimed = size
    audit_log.append(f"Deleted: {primary}")

    deleted: list[str] = []
    failed: list[str] = []
    for sidecar in sidecar_files(primary, extensions):
        sidecar_size = file_size(sidecar)
        try:
            os.remove(sidecar)
        except (OSError, ValueError) as exc:
            logger.debug("Sidecar removal failed for %s: %s", sidecar, exc)
            audit_log.append(f"ERROR: Failed to delete sidecar: {sidecar}")
            failed.append(sidecar)
            continue
        reclaimed += sidecar_size
        audit_log.append(f"Deleted sidecar: {sidecar}")
        deleted.append(sidecar)

    error = None
    try:
        records.delete(asset)
    except Exception as exc:  # noqa: BLE001
        error = str(exc) or type(exc).__name__
        audit_log.append(f"ERROR: Database deletion failed for {primary}: {error}")

    return DeletionOutcome(
        primary_path=primary,
        primary_deleted=True,
        bytes_reclaimed=reclaimed,
        sidecars_deleted=tuple(deleted),
        sidecars_failed=tuple(failed),
        record_removed=error is None,
        error=error,
    )
