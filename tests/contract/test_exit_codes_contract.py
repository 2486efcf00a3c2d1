from __future__ import annotations
from unittest.mock import patch

import pytest

from wifi_importer.cli import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL, main as cli_main
from wifi_importer.registration.base import RegistrationStatus
from wifi_importer.registration.mock import MockRegistrar


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


@pytest.mark.parametrize(
    "csv_text, expected",
    [
        ("ssid,password,security\nHome,pw,WPA2\n", EXIT_SUCCESS_ALL),
        ("ssid,password,security\n", EXIT_SUCCESS_ALL),
        ("ssid,password,security\nHome,pw,WPA2\nBad\n", EXIT_PARTIAL_FAILURE),
        ("ssid,password,security\n,pw,WPA2\n", EXIT_PARTIAL_FAILURE),
    ],
)
def test_import_exit_codes(write_csv, csv_text, expected):
    write_csv(csv_text)
    assert cli_main(["data/networks.csv"]) == expected


def test_bulk_failure_exit_code(write_csv):
    write_csv("ssid,password,security\nHome,pw,WPA2\n")
    with patch("wifi_importer.cli.main.build_registrar", return_value=MockRegistrar(RegistrationStatus.FAILURE)):
        assert cli_main(["data/networks.csv"]) == EXIT_PARTIAL_FAILURE


def test_fatal_exit_codes(temp_workdir):
    assert cli_main([]) == EXIT_FATAL
    assert cli_main(["--config", "config/missing.yml", "x.csv"]) == EXIT_FATAL
