"""Single-flight deletion sessions guarded by an explicit confirmation token."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cull.audit import AuditLog
from cull.engine import PROGRESS_INTERVAL, audit_space, perform_deletion
from cull.files import DEFAULT_SIDECAR_EXTENSIONS
from cull.host import AssetSource, RecordStore, collection_info, select_rejected
from cull.models import DeleteResult, DryRunReport, RunStatus

logger = logging.getLogger(__name__)


class Confirmation:
    """Operator consent for one deletion run; consumed by the run it enables."""

    def __init__(self, armed: bool = False) -> None:
        self._armed = armed

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        self._armed = True

    def consume(self) -> None:
        self._armed = False


class DeletionController:
    def __init__(
        self,
        source: AssetSource,
        records: RecordStore,
        audit_log: AuditLog,
        extensions: Iterable[str] = DEFAULT_SIDECAR_EXTENSIONS,
        progress_interval: int = PROGRESS_INTERVAL,
    ) -> None:
        self.source = source
        self.records = records
        self.audit_log = audit_log
        self.extensions = tuple(extensions)
        self.progress_interval = progress_interval
        self.in_progress = False

    def info(self) -> str:
        return collection_info(self.source.assets())

    def check_space(self) -> DryRunReport:
        candidates = select_rejected(self.source.assets())
        return audit_space(candidates, self.audit_log, self.extensions)

    def delete_permanently(self, confirmation: Confirmation) -> DeleteResult:
        if self.in_progress:
            print("Deletion already in progress. Please wait...")
            self.audit_log.append("Deletion attempt while another run is in progress - blocked")
            return DeleteResult(RunStatus.BLOCKED_BUSY)

        candidates = select_rejected(self.source.assets())
        if not candidates:
            print("No rejected images to delete.")
            self.audit_log.append("No rejected images to delete - blocked")
            return DeleteResult(RunStatus.NO_CANDIDATES)

        if not confirmation.armed:
            print("Refusing to delete without confirmation.")
            logger.warning("Deletion requires explicit confirmation; nothing was deleted.")
            self.audit_log.append("Deletion attempt without confirmation - blocked")
            return DeleteResult(RunStatus.BLOCKED_UNCONFIRMED)

        self.in_progress = True
        try:
            print(f"Starting deletion of {len(candidates)} rejected images...")
            self.audit_log.append(f"User confirmed deletion of {len(candidates)} images")
            report = perform_deletion(
                candidates,
                self.records,
                self.audit_log,
                self.extensions,
                self.progress_interval,
            )
        finally:
            confirmation.consume()
            self.in_progress = False
        return DeleteResult(report.status, report)
