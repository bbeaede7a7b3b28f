"""Tests for the command-line entry point."""

import csv
import io
import json

import pytest

import main

ENTRIES_CSV = (
    "Timestamp,Platform,Game ID,WhatsApp,Numbers,Draw Date,Contest,Ticket,Status\n"
    "02/06/2025 19:45:00,POPN1,1000000001,,1 2 3,02/06/2025,1001,T1,\n"
    "08/06/2025 11:00:00,POPN1,1000000001,,4 5 6,09/06/2025,1002,T2,\n"
)
RECHARGES_CSV = (
    "Game ID,Recharge ID,A,B,C,Time,Type,Source,Amount\n"
    "1000000001,R1,,,,02/06/2025 19:30:00,充值,三方,20\n"
)


@pytest.fixture
def sheets(tmp_path, env_config, monkeypatch):
    monkeypatch.setattr(main, "setup_logger", lambda **kwargs: None)
    entries = tmp_path / "entries.csv"
    recharges = tmp_path / "recharges.csv"
    entries.write_text(ENTRIES_CSV, encoding="utf-8")
    recharges.write_text(RECHARGES_CSV, encoding="utf-8")
    return entries, recharges


@pytest.mark.asyncio
async def test_writes_verdict_csv(sheets, tmp_path, capsys):
    entries, recharges = sheets
    output = tmp_path / "out" / "verdicts.csv"

    code = await main.main([str(entries), str(recharges), "-o", str(output), "--json"])

    assert code == 0
    rows = list(csv.DictReader(io.StringIO(output.read_text(encoding="utf-8"))))
    assert [r["verdict"] for r in rows] == ["VALID", "INVALID"]
    assert rows[1]["reason_code"] == "INVALID_RECHARGE_WINDOW_EXPIRED"
    report = json.loads(capsys.readouterr().out)
    assert report["valid"] == 1
    assert report["rechargeCount"] == 1


@pytest.mark.asyncio
async def test_without_recharges_prints_unknown(sheets, capsys):
    entries, _ = sheets

    code = await main.main([str(entries), "--batch-size", "1"])

    assert code == 0
    rows = list(csv.DictReader(io.StringIO(capsys.readouterr().out)))
    assert {r["verdict"] for r in rows} == {"UNKNOWN"}


@pytest.mark.asyncio
async def test_bad_configuration_exits_with_code(sheets, monkeypatch):
    entries, recharges = sheets
    monkeypatch.setenv("NO_DRAW_WEEKDAYS", "0,1,2,3,4,5,6")

    assert await main.main([str(entries), str(recharges)]) == main.EXIT_CONFIGURATION_ERROR


@pytest.mark.asyncio
async def test_calendar_failure_aborts_run(sheets, monkeypatch, tmp_path):
    entries, recharges = sheets
    output = tmp_path / "verdicts.csv"
    # A one-day probe cannot get past a Sunday
    monkeypatch.setenv("CALENDAR_PROBE_LIMIT", "1")

    code = await main.main([str(entries), str(recharges), "-o", str(output)])

    assert code == main.EXIT_CONFIGURATION_ERROR
    assert not output.exists()
