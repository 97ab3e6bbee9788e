from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum

from cull.files import format_bytes

REJECTED_RATING = -1


class RunStatus(IntEnum):
    SUCCEEDED = 0
    NO_CANDIDATES = 1
    PARTIAL = 2
    BLOCKED_UNCONFIRMED = 3
    BLOCKED_BUSY = 4


@dataclass(frozen=True)
class Asset:
    directory: str
    filename: str
    rating: int = 0

    @property
    def path(self) -> str:
        return os.path.join(self.directory, self.filename)

    @property
    def rejected(self) -> bool:
        return self.rating == REJECTED_RATING


@dataclass(frozen=True)
class DeletionOutcome:
    primary_path: str
    primary_deleted: bool
    bytes_reclaimed: int = 0
    sidecars_deleted: tuple[str, ...] = ()
    sidecars_failed: tuple[str, ...] = ()
    record_removed: bool | None = None  # None when removal was never attempted
    error: str | None = None


@dataclass(frozen=True)
class DryRunReport:
    file_count: int
    sidecar_count: int
    total_bytes: int

    def render(self) -> str:
        if self.file_count == 0:
            return "No rejected images found in the current collection."
        return (
            f"Found {self.file_count} rejected images ({self.sidecar_count} sidecar files).\n"
            f"Total space to be recovered: {format_bytes(self.total_bytes)}."
        )


@dataclass(frozen=True)
class SessionReport:
    total: int
    deleted_files: tuple[str, ...]
    deleted_sidecars: tuple[str, ...]
    failed_deletions: tuple[str, ...]
    failed_sidecars: tuple[str, ...]
    failed_record_removals: tuple[str, ...]
    bytes_reclaimed: int

    @classmethod
    def from_outcomes(cls, total: int, outcomes: list[DeletionOutcome]) -> SessionReport:
        return cls(
            total=total,
            deleted_files=tuple(o.primary_path for o in outcomes if o.primary_deleted),
            deleted_sidecars=tuple(p for o in outcomes for p in o.sidecars_deleted),
            failed_deletions=tuple(o.primary_path for o in outcomes if not o.primary_deleted),
            failed_sidecars=tuple(p for o in outcomes for p in o.sidecars_failed),
            failed_record_removals=tuple(
                o.primary_path for o in outcomes if o.record_removed is False
            ),
            bytes_reclaimed=sum(o.bytes_reclaimed for o in outcomes),
        )

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_deletions or self.failed_sidecars or self.failed_record_removals)

    @property
    def status(self) -> RunStatus:
        return RunStatus.PARTIAL if self.has_failures else RunStatus.SUCCEEDED

    def render(self) -> str:
        message = (
            "Deletion complete!\n"
            f"Images deleted: {len(self.deleted_files)}/{self.total}\n"
            f"Sidecars deleted: {len(self.deleted_sidecars)}\n"
            f"Space recovered: {format_bytes(self.bytes_reclaimed)}"
        )
        if self.failed_deletions:
            message += (
                f"\n\nWarning: {len(self.failed_deletions)} files could not be deleted "
                "(check log for details)"
            )
        if self.failed_sidecars:
            message += f"\nWarning: {len(self.failed_sidecars)} sidecar files could not be deleted"
        if self.failed_record_removals:
            message += (
                f"\nWarning: {len(self.failed_record_removals)} images could not be "
                "removed from database"
            )
        return message


@dataclass(frozen=True)
class DeleteResult:
    status: RunStatus
    report: SessionReport | None = None
