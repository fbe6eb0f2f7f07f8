from __future__ import annotations

import threading

import pytest

from addrsync import main as main_module
from addrsync.config import DEFAULT_BATCH_SIZE, CheckpointMode, ImportConfig


@pytest.fixture(autouse=True)
def quiet_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ADDRSYNC_BATCH_SIZE", raising=False)
    monkeypatch.delenv("ADDRSYNC_CHECKPOINT_MODE", raising=False)
    monkeypatch.setattr(main_module, "configure_logging", lambda **_: None)


def test_main_cli_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_import(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(main_module, "run_address_import", fake_import)

    main_module.main([])

    assert captured["config"] == ImportConfig(
        batch_size=DEFAULT_BATCH_SIZE, checkpoint_mode=CheckpointMode.GRANULAR
    )
    assert captured["cancel"] is main_module.cancel_requested


def test_main_cli_with_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_import(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr(main_module, "run_address_import", fake_import)

    main_module.main(["--batch-size", "50", "--checkpoint-mode", "range", "--verbose"])

    assert captured["config"] == ImportConfig(batch_size=50, checkpoint_mode=CheckpointMode.RANGE)


def test_main_cli_invalid_batch_size(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main_module, "run_address_import", lambda **_: None)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["--batch-size", "0"])

    assert excinfo.value.code == 2


def test_main_cli_reports_import_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def failing_import(**_: object) -> None:
        raise RuntimeError("feed unavailable")

    monkeypatch.setattr(main_module, "run_address_import", failing_import)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main([])

    assert excinfo.value.code == 1
    assert "Error: feed unavailable" in capsys.readouterr().err


def test_sigint_requests_cancellation(monkeypatch: pytest.MonkeyPatch) -> None:
    event = threading.Event()
    monkeypatch.setattr(main_module, "cancel_requested", event)

    main_module.sigint_handler(2, None)

    assert event.is_set()
