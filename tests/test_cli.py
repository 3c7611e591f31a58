"""End-to-end tests for the command line interface."""

import logging

import pytest

from dropship_manager.__main__ import main
from dropship_manager.utils import logger as logger_module


@pytest.fixture(autouse=True)
def isolated_logger(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "LOG_DIR", tmp_path / "logs")
    yield
    package_logger = logging.getLogger(logger_module.LOGGER_NAME)
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "marketplace"
    main(["--data-dir", str(path), "sample", "--seed", "1"])
    return path


def test_sample_writes_csv_files(data_dir):
    for name in ("orders.csv", "users.csv", "payouts.csv"):
        assert (data_dir / name).exists()
    assert (data_dir.parent / "logs" / "dropship.log").exists()


def test_settle_prints_balances(data_dir, capsys):
    main(["--data-dir", str(data_dir), "settle"])

    out = capsys.readouterr().out
    assert "HESAPLASMA OZETI" in out
    assert "ODEME BAKIYELERI" in out


def test_analyze_prints_report(data_dir, capsys):
    main(["--data-dir", str(data_dir), "analyze", "--days", "120", "--bucket", "month"])

    out = capsys.readouterr().out
    assert "PAZARYERI ANALIZ RAPORU" in out
    assert "Siparis Durumlari" in out


def test_report_writes_workbook(data_dir, tmp_path, capsys):
    output = tmp_path / "rapor.xlsx"

    main(["--data-dir", str(data_dir), "report", "--days", "120", "--output", str(output)])

    assert output.exists()
    assert "Rapor olusturuldu" in capsys.readouterr().out


def test_invalid_window_exits_with_error(data_dir, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--data-dir", str(data_dir), "analyze", "--from", "2025-02-01", "--to", "2025-01-01"])

    assert exc_info.value.code == 1
    assert "Hata" in capsys.readouterr().err


def test_empty_data_dir(tmp_path, capsys):
    main(["--data-dir", str(tmp_path / "empty"), "analyze"])

    assert "Veri bulunamadi" in capsys.readouterr().out
