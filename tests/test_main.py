"""Tests for the command line entry point"""

import json
import logging

import pytest

from kraken_client import __main__ as cli
from kraken_client.core.config import ClientSettings
from kraken_client.services.exchange.client import KrakenClient

from conftest import ASSETS, TIME_ENVELOPE, FakeTransport


@pytest.fixture
def fake_client(monkeypatch):
    """Route CLI calls through a recording transport"""
    transport = FakeTransport()
    settings = ClientSettings(_env_file=None, api_key=None, api_secret=None)

    def from_settings(cls, s, **kwargs):
        return KrakenClient(transport=transport)

    monkeypatch.setattr(cli, "get_config", lambda: settings)
    monkeypatch.setattr(cli.KrakenClient, "from_settings", classmethod(from_settings))
    return transport


def test_parser_assets_default():
    args = cli.build_parser().parse_args(["assets"])

    assert args.command == "assets"
    assert args.assets == "all"


def test_parser_pairs_info():
    args = cli.build_parser().parse_args(["pairs", "--info", "fees", "ETHUSD"])

    assert args.info == "fees"
    assert args.pair == "ETHUSD"


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


@pytest.mark.asyncio
async def test_run_prints_result(fake_client, capsys):
    fake_client.responses.append(TIME_ENVELOPE)

    code = await cli.run(cli.build_parser().parse_args(["time"]))

    assert code == 0
    assert json.loads(capsys.readouterr().out) == TIME_ENVELOPE["result"]
    assert fake_client.closed


@pytest.mark.asyncio
async def test_run_assets(fake_client, capsys):
    fake_client.responses.append({"error": [], "result": {"XETH": ASSETS["XETH"]}})

    code = await cli.run(cli.build_parser().parse_args(["assets", "ETH"]))

    assert code == 0
    options, _ = fake_client.calls[0]
    assert options.path == "/0/public/Assets?asset=ETH"


@pytest.mark.asyncio
async def test_run_balance_without_credentials(fake_client, capsys):
    code = await cli.run(cli.build_parser().parse_args(["balance"]))

    assert code == 1
    assert fake_client.call_count == 0
    assert capsys.readouterr().out == ""


@pytest.mark.asyncio
async def test_run_failure_logs_tagged_exception(fake_client, caplog):
    with caplog.at_level(logging.ERROR, logger="kraken_client"):
        code = await cli.run(cli.build_parser().parse_args(["balance"]))

    assert code == 1
    records = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert records[-1].getMessage().startswith("ConfigurationError: ")
    assert records[-1].context == {"command": "balance", "kind": "configuration"}
