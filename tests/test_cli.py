import pytest
import pytest_mock
from typer import testing

import cli
from conftest import make_snapshot
from features.common.exceptions.scrape_exceptions import TransportError

@pytest.fixture
def runner() -> testing.CliRunner:
    return testing.CliRunner()

def test_now_prints_matching_slot(mocker: pytest_mock.MockerFixture, runner: testing.CliRunner):
    mock_scrape = mocker.patch.object(cli, "scrape_snapshot", return_value=make_snapshot())

    result = runner.invoke(cli.app, ["now", "--at", "2026-10-18T12:30:00+02:00"])

    assert result.exit_code == 0
    mock_scrape.assert_called_once_with(cli.settings.forecast_url)
    lines = result.output.splitlines()
    assert lines[0] == "Els Poblets (match)"
    assert lines[1].startswith("Time")
    assert lines[2].startswith("2026-10-18 13:00")
    assert "10kn" in lines[2]
    assert "1.2m" in lines[2]

def test_now_uses_given_url(mocker: pytest_mock.MockerFixture, runner: testing.CliRunner):
    mock_scrape = mocker.patch.object(cli, "scrape_snapshot", return_value=make_snapshot())

    runner.invoke(cli.app, ["now", "-u", "https://example.test/spot"])

    mock_scrape.assert_called_once_with("https://example.test/spot")

def test_now_with_empty_forecast_exits_with_error(mocker: pytest_mock.MockerFixture, runner: testing.CliRunner):
    mocker.patch.object(cli, "scrape_snapshot", return_value=make_snapshot(offsets_hours=[]))

    result = runner.invoke(cli.app, ["now"])

    assert result.exit_code == 1
    assert "no slots" in result.output

def test_now_with_invalid_time_is_rejected(mocker: pytest_mock.MockerFixture, runner: testing.CliRunner):
    mock_scrape = mocker.patch.object(cli, "scrape_snapshot")

    result = runner.invoke(cli.app, ["now", "--at", "half past noon"])

    assert result.exit_code != 0
    mock_scrape.assert_not_called()

def test_scrape_failure_exits_with_error(mocker: pytest_mock.MockerFixture, runner: testing.CliRunner):
    mocker.patch.object(cli, "_scrape", side_effect=TransportError("HTTP 503 fetching spot"))

    result = runner.invoke(cli.app, ["now"])

    assert result.exit_code == 1
    assert "TransportError" in result.output

def test_show_prints_every_slot(mocker: pytest_mock.MockerFixture, runner: testing.CliRunner):
    mocker.patch.object(cli, "scrape_snapshot", return_value=make_snapshot())

    result = runner.invoke(cli.app, ["show"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "Els Poblets"
    assert len(lines) == 5
    assert [line[:16] for line in lines[2:]] == [
        "2026-10-18 12:00",
        "2026-10-18 13:00",
        "2026-10-18 15:00"
    ]
