# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from wifi_importer.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("WIFI_IMPORTER_BACKEND", raising=False)
    monkeypatch.delenv("WIFI_IMPORTER_ENCODING", raising=False)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_csv_text() -> str:
    return (
        "ssid,password,security\n"
        "HomeNet,secret123,WPA2\n"
        "Cafe,,OPEN\n"
        "MyWifi,,WPA2\n"
        "Office,pa55word,wpa3\n"
        ",x,WPA3\n"
        "Home,abc,ENTERPRISE\n"
        "Broken,row\n"
    )


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(text: str, name: str = "networks.csv") -> Path:
        path = temp_workdir / "data" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def sample_csv(write_csv, sample_csv_text: str) -> Path:
    return write_csv(sample_csv_text)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """csv_file: ./data/networks.csv
encoding: utf-8
backend: mock
error_log_dir: ./logs
nmcli:
  binary: nmcli
  connection_prefix: "import-"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def csv_with_networks(write_csv):
    """Write a CSV with `count` valid WPA2 rows (Net0..NetN-1)."""
    def _make(count: int) -> Path:
        lines = ["ssid,password,security"]
        lines += [f"Net{i},password{i},WPA2" for i in range(count)]
        return write_csv("\n".join(lines) + "\n")
    return _make
