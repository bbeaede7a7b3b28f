"""Spreadsheet CSV rows to ``Entry`` / ``Recharge`` records, and verdict export.

Column positions are a property of the upstream sheets, not of the engine.
"""

from __future__ import annotations

import csv
import io
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core import get_logger
from core.constants import RechargeStatus, ValidationDefaults
from core.exceptions import RecordParseError
from core.models import Entry, Recharge, TicketVerdict
from services.validation_report import describe_reason
from utils.validators import parse_amount, parse_brazil_time, parse_chosen_numbers

logger = get_logger(__name__)

DELIMITERS = (",", ";", "\t", "|")

# Entries sheet: Timestamp, Platform, Game ID, WhatsApp, Numbers, Draw Date, Contest, Ticket #, Status
ENTRY_MIN_COLUMNS = 9
# Recharge sheet: Game ID, Recharge ID, ..., Time (5), Type (6), Source (7), Amount (8)
RECHARGE_MIN_COLUMNS = 9
RECHARGE_TIME_COLUMN = 5
RECHARGE_TYPE_COLUMN = 6
RECHARGE_SOURCE_COLUMN = 7
RECHARGE_AMOUNT_COLUMN = 8

EXPORT_COLUMNS = [
    "game_id", "ticket_number", "ticket_time", "contest", "draw_date_label",
    "chosen_numbers", "verdict", "reason_code", "reason", "draw_day",
    "bound_recharge_id", "bound_recharge_time", "bound_recharge_amount", "cutoff_flag",
]


def detect_delimiter(header_line: str) -> str:
    """Pick the most frequent candidate delimiter in the header line."""
    counts = {d: header_line.count(d) for d in DELIMITERS}
    best = max(DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def _read_rows(text: str) -> List[List[str]]:
    """Data rows of a sheet export: header and blank rows dropped, cells stripped."""
    header = next((line for line in text.splitlines() if line.strip()), None)
    if header is None:
        return []
    reader = csv.reader(io.StringIO(text), delimiter=detect_delimiter(header))
    rows = [[value.strip() for value in row] for row in reader]
    return [row for row in rows if any(row)][1:]


def parse_entry_row(row: List[str]) -> Entry:
    timestamp = row[0]
    return Entry(
        game_id=row[2],
        ticket_time=parse_brazil_time(timestamp),
        chosen_numbers=parse_chosen_numbers(row[4]),
        contest=row[6],
        draw_date_label=row[5],
        ticket_number=row[7],
        raw_timestamp=timestamp,
        platform=(row[1] or "POPN1").upper(),
        whatsapp=row[3],
        source_status=(row[8] or "PENDING").upper(),
    )


def parse_recharge_row(row: List[str]) -> Optional[Recharge]:
    """Build a recharge from a sheet row, or None for non-recharge rows."""
    if row[RECHARGE_TYPE_COLUMN] != ValidationDefaults.RECHARGE_ROW_TYPE:
        return None
    raw_time = row[RECHARGE_TIME_COLUMN]
    return Recharge(
        game_id=row[0],
        recharge_id=row[1],
        recharge_time=parse_brazil_time(raw_time),
        amount=parse_amount(row[RECHARGE_AMOUNT_COLUMN]),
        raw_time=raw_time,
        source=row[RECHARGE_SOURCE_COLUMN] or ValidationDefaults.RECHARGE_DEFAULT_SOURCE,
    )


def parse_entries_csv(text: str) -> List[Entry]:
    """Parse the entries sheet. Short rows and rows without a Game ID are skipped."""
    entries = []
    skipped = 0
    for row in _read_rows(text):
        if len(row) < ENTRY_MIN_COLUMNS or not row[2]:
            skipped += 1
            continue
        entries.append(parse_entry_row(row))
    if skipped:
        logger.debug(f"Skipped {skipped} malformed entry rows")
    return entries


def parse_recharges_csv(text: str) -> List[Recharge]:
    """Parse the recharge sheet, keeping only recharge-type rows."""
    recharges = []
    for row in _read_rows(text):
        if len(row) < RECHARGE_MIN_COLUMNS:
            continue
        recharge = parse_recharge_row(row)
        if recharge is not None:
            recharges.append(recharge)
    return recharges


def _require(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    raise RecordParseError(f"Missing field {keys[0]!r}")


def _numbers_field(item: Mapping[str, Any]) -> tuple[int, ...]:
    raw = item.get("chosenNumbers", item.get("chosen_numbers"))
    if raw is not None and not isinstance(raw, (str, list, tuple)):
        raise RecordParseError("'chosenNumbers' must be a string or a list")
    return parse_chosen_numbers(raw)


def _amount_field(item: Mapping[str, Any]) -> float:
    raw = item.get("amount")
    if raw is not None and (isinstance(raw, bool) or not isinstance(raw, (str, int, float))):
        raise RecordParseError("'amount' must be a number or a string")
    return parse_amount(raw)


def entries_from_dicts(items: Iterable[Mapping[str, Any]]) -> List[Entry]:
    """Build entries from JSON objects (camelCase or snake_case keys).

    Raises:
        RecordParseError: If an item is not an object, has no game id or has a malformed number list
    """
    entries = []
    for item in items:
        if not isinstance(item, Mapping):
            raise RecordParseError("Entry must be an object")
        raw_time = item.get("ticketTime", item.get("ticket_time")) or ""
        entries.append(Entry(
            game_id=str(_require(item, "gameId", "game_id")).strip(),
            ticket_time=parse_brazil_time(str(raw_time)),
            chosen_numbers=_numbers_field(item),
            contest=str(item.get("contest", "") or ""),
            draw_date_label=str(item.get("drawDateLabel", item.get("draw_date_label", "")) or ""),
            ticket_number=str(item.get("ticketNumber", item.get("ticket_number", "")) or ""),
            raw_timestamp=str(raw_time),
            platform=str(item.get("platform", "") or ""),
            whatsapp=str(item.get("whatsapp", "") or ""),
            source_status=str(item.get("status", "") or ""),
        ))
    return entries


def recharges_from_dicts(items: Iterable[Mapping[str, Any]]) -> List[Recharge]:
    """Build recharges from JSON objects (camelCase or snake_case keys).

    Raises:
        RecordParseError: If an item is not an object, lacks its ids or has a malformed amount
    """
    recharges = []
    for item in items:
        if not isinstance(item, Mapping):
            raise RecordParseError("Recharge must be an object")
        raw_time = item.get("rechargeTime", item.get("recharge_time")) or ""
        recharges.append(Recharge(
            game_id=str(_require(item, "gameId", "game_id")).strip(),
            recharge_id=str(_require(item, "rechargeId", "recharge_id")).strip(),
            recharge_time=parse_brazil_time(str(raw_time)),
            amount=_amount_field(item),
            raw_time=str(raw_time),
            source=str(item.get("source", "") or ""),
            status=str(item.get("status", RechargeStatus.VALID.value) or RechargeStatus.VALID.value).upper(),
        ))
    return recharges


def verdict_row(item: TicketVerdict) -> Dict[str, str]:
    entry = item.entry
    bound_time = item.bound_recharge_time
    amount = item.bound_recharge_amount
    return {
        "game_id": entry.game_id,
        "ticket_number": entry.ticket_number,
        "ticket_time": entry.ticket_time.isoformat() if entry.ticket_time else entry.raw_timestamp,
        "contest": entry.contest,
        "draw_date_label": entry.draw_date_label,
        "chosen_numbers": " ".join(str(n) for n in entry.chosen_numbers),
        "verdict": item.verdict.value,
        "reason_code": item.reason_code.value if item.reason_code else "",
        "reason": describe_reason(item.reason_code),
        "draw_day": item.draw_day.isoformat() if item.draw_day else "",
        "bound_recharge_id": item.bound_recharge_id or "",
        "bound_recharge_time": bound_time.isoformat() if bound_time else "",
        "bound_recharge_amount": "" if amount is None else f"{amount:.2f}",
        "cutoff_flag": "true" if item.cutoff_flag else "false",
    }


def write_verdicts_csv(verdicts: Iterable[TicketVerdict]) -> str:
    """Export verdicts as CSV text with a header row."""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for item in verdicts:
        writer.writerow(verdict_row(item))
    return output.getvalue()
