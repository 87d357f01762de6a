##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other IPC-KeyVal
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to IPC-KeyVal.
##############################################################################

"""
Tests for the `main.py` module.
"""

import pytest
from _pytest.capture import CaptureFixture
from pytest_mock import MockerFixture

from ipc_keyval.main import main
from tests.fixture_types import FixtureStr


@pytest.fixture(autouse=True)
def mock_setup_logging(mocker: MockerFixture):
    """
    Keep `main` from reconfiguring the package logger for the rest of the test session.

    Args:
        mocker: PyTest mocker fixture.
    """
    return mocker.patch("ipc_keyval.main.setup_logging")


def test_main_without_arguments_prints_help(mocker: MockerFixture, capsys: CaptureFixture):
    """
    Test that running without arguments prints the help and returns 1.

    Args:
        mocker: PyTest mocker fixture.
        capsys: PyTest capsys fixture.
    """
    mocker.patch("sys.argv", ["ipc-keyval"])
    assert main() == 1
    assert "usage: ipc-keyval" in capsys.readouterr().out


def test_main_runs_command(
    mocker: MockerFixture, capsys: CaptureFixture, keyval_url: FixtureStr, mock_setup_logging
):
    """
    Test that a command runs to completion and exits with status 0.

    Args:
        mocker: PyTest mocker fixture.
        capsys: PyTest capsys fixture.
        keyval_url: A SQLite connection URL in a temporary directory.
        mock_setup_logging: The mocked logging setup.
    """
    mocker.patch("sys.argv", ["ipc-keyval", "--url", keyval_url, "-lvl", "debug", "put", "k", "[1, 2]"])
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert not excinfo.value.code
    mock_setup_logging.assert_called_once()
    assert mock_setup_logging.call_args.kwargs["log_level"] == "DEBUG"

    mocker.patch("sys.argv", ["ipc-keyval", "--url", keyval_url, "get", "k"])
    with pytest.raises(SystemExit):
        main()
    assert capsys.readouterr().out == "[1, 2]\n"


def test_main_reports_errors(mocker: MockerFixture):
    """
    Test that an error raised by a command exits with status 1.

    Args:
        mocker: PyTest mocker fixture.
    """
    mocker.patch("sys.argv", ["ipc-keyval", "--url", "postgres://db/coord", "keys"])
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 1
