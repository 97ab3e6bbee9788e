from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cull.audit import AuditLog
from cull.models import Asset, DeleteResult, RunStatus
from cull.session import Confirmation, DeletionController


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class InMemoryHost:
    def __init__(self, assets: list[Asset | None] | None) -> None:
        self.items = assets
        self.deleted: list[Asset] = []
        self.on_delete = None

    def assets(self) -> list[Asset | None] | None:
        return self.items

    def delete(self, asset: Asset) -> None:
        if self.on_delete is not None:
            self.on_delete(asset)
        self.deleted.append(asset)


def _controller(
    tmp_path: Path, assets: list[Asset | None] | None
) -> tuple[DeletionController, InMemoryHost]:
    host = InMemoryHost(assets)
    controller = DeletionController(host, host, AuditLog(tmp_path / "audit.log"))
    return controller, host


def _log_text(tmp_path: Path) -> str:
    path = tmp_path / "audit.log"
    return path.read_text(encoding="utf-8") if path.exists() else ""


def _photo(tmp_path: Path, name: str, rating: int = -1) -> Asset:
    _write(tmp_path / "photos" / name, name)
    return Asset(directory=str(tmp_path / "photos"), filename=name, rating=rating)


def test_confirmed_run_deletes_and_consumes_confirmation(tmp_path: Path) -> None:
    rejected = _photo(tmp_path, "a.raw")
    kept = _photo(tmp_path, "b.raw", rating=3)
    controller, host = _controller(tmp_path, [rejected, None, kept])
    confirmation = Confirmation()
    confirmation.arm()

    result = controller.delete_permanently(confirmation)

    assert result.status == RunStatus.SUCCEEDED
    assert result.report is not None and result.report.deleted_files == (rejected.path,)
    assert host.deleted == [rejected]
    assert Path(kept.path).exists()
    assert not confirmation.armed
    assert not controller.in_progress
    assert "User confirmed deletion of 1 images" in _log_text(tmp_path)


def test_partial_run_also_consumes_confirmation(tmp_path: Path) -> None:
    missing = Asset(directory=str(tmp_path / "photos"), filename="gone.raw", rating=-1)
    controller, _ = _controller(tmp_path, [missing])
    confirmation = Confirmation(armed=True)

    result = controller.delete_permanently(confirmation)

    assert result.status == RunStatus.PARTIAL
    assert not confirmation.armed


def test_unconfirmed_run_is_blocked_and_logged(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, capsys: pytest.CaptureFixture[str]
) -> None:
    rejected = _photo(tmp_path, "a.raw")
    controller, host = _controller(tmp_path, [rejected])

    with caplog.at_level(logging.WARNING, logger="cull.session"):
        result = controller.delete_permanently(Confirmation())

    assert result == DeleteResult(RunStatus.BLOCKED_UNCONFIRMED)
    assert "Refusing to delete without confirmation." in capsys.readouterr().out
    assert Path(rejected.path).exists()
    assert host.deleted == []
    assert "explicit confirmation" in caplog.text
    assert "Deletion attempt without confirmation - blocked" in _log_text(tmp_path)


def test_no_candidates_leaves_confirmation_armed(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    controller, _ = _controller(tmp_path, [_photo(tmp_path, "keep.raw", rating=1)])
    confirmation = Confirmation(armed=True)

    result = controller.delete_permanently(confirmation)

    assert result.status == RunStatus.NO_CANDIDATES
    assert confirmation.armed
    assert "No rejected images to delete." in capsys.readouterr().out
    assert "No rejected images to delete - blocked" in _log_text(tmp_path)


def test_empty_collection_emits_diagnostic(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    controller, _ = _controller(tmp_path, None)

    with caplog.at_level(logging.WARNING, logger="cull.host"):
        result = controller.delete_permanently(Confirmation(armed=True))

    assert result.status == RunStatus.NO_CANDIDATES
    assert "No images in the current collection." in caplog.text


def test_reentrant_run_is_rejected(tmp_path: Path) -> None:
    first = _photo(tmp_path, "a.raw")
    second = _photo(tmp_path, "b.raw")
    controller, host = _controller(tmp_path, [first, second])
    nested: list[DeleteResult] = []

    def delete_again(asset: Asset) -> None:
        nested.append(controller.delete_permanently(Confirmation(armed=True)))

    host.on_delete = delete_again
    confirmation = Confirmation(armed=True)

    result = controller.delete_permanently(confirmation)

    assert [r.status for r in nested] == [RunStatus.BLOCKED_BUSY, RunStatus.BLOCKED_BUSY]
    assert result.status == RunStatus.SUCCEEDED
    assert result.report is not None and len(result.report.deleted_files) == 2
    assert host.deleted == [first, second]
    assert not controller.in_progress
    assert "Deletion attempt while another run is in progress - blocked" in _log_text(tmp_path)


def test_flag_resets_when_engine_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    controller, _ = _controller(tmp_path, [_photo(tmp_path, "a.raw")])
    confirmation = Confirmation(armed=True)

    def boom(*args: object, **kwargs: object) -> None:
        raise RuntimeError("disk vanished")

    monkeypatch.setattr("cull.session.perform_deletion", boom)

    with pytest.raises(RuntimeError, match="disk vanished"):
        controller.delete_permanently(confirmation)

    assert not controller.in_progress
    assert not confirmation.armed


def test_check_space_and_info(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    controller, _ = _controller(
        tmp_path,
        [_photo(tmp_path, "a.raw"), _photo(tmp_path, "b.raw", rating=2), None],
    )

    report = controller.check_space()

    assert report.file_count == 1
    assert Path(tmp_path / "photos" / "a.raw").exists()
    assert "Found 1 rejected images" in capsys.readouterr().out
    assert controller.info() == "3 images (1 rejected)"
