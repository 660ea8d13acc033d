from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

import httpx
import pytest
import typer
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import load_config
from services.demo import demo_timestamp
from services.timekeeping import reading_timestamp
from settings import get_settings


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.search_calls: List[int] = []
        self.populate_calls: List[tuple] = []
        self.insert_calls: List[tuple] = []
        self.search_payload: Dict[str, Any] = {
            "timestamp": demo_timestamp(4),
            "found": True,
            "reading": {
                "timestamp": demo_timestamp(4),
                "temperature": 0x007AF2E,
                "humidity": 0x00D8E24,
                "display": "04-Mar-2024     0007AF2E 000D8E24",
            },
            "path": [
                {
                    "timestamp": demo_timestamp(8),
                    "temperature": 0x007EB95,
                    "humidity": 0x00D9669,
                    "display": "08-Mar-2024     0007EB95 000D9669",
                }
            ],
        }
        self.closed = False

    def populate(self, month: int, day: int, num_days: int, year=None) -> Dict[str, Any]:
        self.populate_calls.append((month, day, num_days, year))
        return {"inserted": num_days, "count": num_days}

    def insert_reading(self, timestamp: int, temperature: int, humidity: int) -> Dict[str, Any]:
        self.insert_calls.append((timestamp, temperature, humidity))
        return {"display": "04-Mar-2024     0007AF2E 000D8E24"}

    def search(self, timestamp: int) -> Dict[str, Any]:
        self.search_calls.append(timestamp)
        return self.search_payload

    def table(self) -> Dict[str, Any]:
        return {
            "count": 1,
            "height": 1,
            "readings": [self.search_payload["reading"]],
        }

    def reset(self) -> Dict[str, Any]:
        return {"released": 3}

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return client


def _table_days(output: str) -> List[str]:
    lines = output.split("There are", 1)[1].splitlines()[1:]
    return [line[:11] for line in lines if line.strip() and not line.startswith("Tree height")]


def test_demo_command(stub: StubClient, runner: CliRunner) -> None:
    result = runner.invoke(app, ["demo"])

    assert result.exit_code == 0
    assert "Found data for Timestamp 04-Mar-2024" in result.stdout
    assert "04-Mar-2024     0007AF2E (503.6F) 000D8E24 (888.4%)" in result.stdout
    assert "Did not find data for Timestamp 13-Mar-2024" in result.stdout
    assert "Did not find data for Timestamp 14-Mar-2024" in result.stdout
    assert "There are 12 nodes in the BST." in result.stdout
    assert _table_days(result.stdout) == [f"{day:02d}-Mar-2024" for day in range(1, 13)]
    assert stub.closed is True


def test_demo_command_with_trace(stub: StubClient, runner: CliRunner) -> None:
    result = runner.invoke(app, ["demo", "--trace"])

    assert result.exit_code == 0
    assert "FOUND -> Mon Mar  4 15:00:00 2024" in result.stdout
    assert "-> [1709564400] Mon Mar  4 15:00:00 2024" in result.stdout


def test_session_command(stub: StubClient, runner: CliRunner) -> None:
    result = runner.invoke(
        app,
        ["session", "--year", "2023", "--seed", "7", "--no-trace"],
        input="3,1,5\n03/02/2023\n03/20/2023\nnot-a-date\n\n",
    )

    assert result.exit_code == 0
    assert "User requested 5 data items starting at 03/01/2023" in result.output
    assert "Found data for Timestamp 02-Mar-2023" in result.output
    assert "Did not find data for Timestamp 20-Mar-2023" in result.output
    assert "Invalid date format" in result.output
    assert "There are 5 nodes in the BST." in result.output
    assert _table_days(result.output) == [f"{day:02d}-Mar-2023" for day in range(1, 6)]


def test_session_command_rejects_bad_span(stub: StubClient, runner: CliRunner) -> None:
    result = runner.invoke(app, ["session"], input="13,1,5\n")

    assert result.exit_code == 1
    assert "Month must be between 1 and 12" in result.output


def test_search_command_resolves_date(stub: StubClient, runner: CliRunner) -> None:
    result = runner.invoke(app, ["search", "03/04/2024"])

    assert result.exit_code == 0
    expected = reading_timestamp(date(2024, 3, 4), hour=get_settings().reading_hour)
    assert stub.search_calls == [expected]
    assert "Visiting these nodes:" in result.stdout
    assert "-> [" in result.stdout
    assert "Found data for Timestamp 04-Mar-2024" in result.stdout
    assert stub.closed is True


def test_search_command_accepts_raw_timestamp(stub: StubClient, runner: CliRunner) -> None:
    stub.search_payload = {"timestamp": 12345, "found": False, "reading": None, "path": []}

    result = runner.invoke(app, ["search", "12345"])

    assert result.exit_code == 0
    assert stub.search_calls == [12345]
    assert "Did not find data for Timestamp" in result.stdout


def test_populate_insert_table_and_reset(stub: StubClient, runner: CliRunner) -> None:
    populated = runner.invoke(app, ["populate", "3", "1", "5", "--year", "2023"])
    inserted = runner.invoke(app, ["insert", str(demo_timestamp(4)), "503598", "888356"])
    table = runner.invoke(app, ["table"])
    reset = runner.invoke(app, ["reset"])

    assert populated.exit_code == 0
    assert "Inserted 5 readings" in populated.stdout
    assert stub.populate_calls == [(3, 1, 5, 2023)]
    assert inserted.exit_code == 0
    assert stub.insert_calls == [(demo_timestamp(4), 503598, 888356)]
    assert table.exit_code == 0
    assert "04-Mar-2024     0007AF2E 000D8E24" in table.stdout
    assert "Tree height: 1" in table.stdout
    assert reset.exit_code == 0
    assert "Released 3 readings." in reset.stdout


def _client_with_transport(handler) -> ApiClient:
    client = ApiClient(load_config(base_url="http://testserver"))
    client._client = httpx.Client(  # type: ignore[attr-defined]
        base_url="http://testserver", transport=httpx.MockTransport(handler)
    )
    return client


def test_api_client_search_returns_not_found_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/readings/42"
        return httpx.Response(404, json={"timestamp": 42, "found": False, "reading": None, "path": []})

    client = _client_with_transport(handler)
    try:
        assert client.search(42)["found"] is False
    finally:
        client.close()


def test_api_client_reports_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"detail": "Month must be between 1 and 12, got 13."})

    client = _client_with_transport(handler)
    try:
        with pytest.raises(typer.Exit):
            client.populate(13, 1, 5)
    finally:
        client.close()


def test_api_client_reports_rejected_fields(capsys) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422,
            json={
                "detail": [
                    {
                        "loc": ["body", "timestamp"],
                        "msg": "Input should be less than or equal to 253402300799",
                    }
                ]
            },
        )

    client = _client_with_transport(handler)
    try:
        with pytest.raises(typer.Exit):
            client.insert_reading(10**12, 1, 2)
    finally:
        client.close()

    assert "status 422: timestamp: Input should be less than or equal to" in capsys.readouterr().err
