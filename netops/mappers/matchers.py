"""
netops/mappers/matchers.py

Per-family row matchers.

Each matcher turns one captured line into a dict of canonical field values
(see `fields.build_canonical_row`). Three layouts are tried in order:

    concatenated   PDF text where column boundaries were lost
                   "ARVA2001 - South Bell as1-arva2001-e1516Switch08/20/2025 10:2250%OPEN40.1 min.3"
    prose          "ATL-SW1 experienced interface down, 5 occurrences, avg 12.3 min, 08/15/2025 10:30"
    columns        cells separated by pipes, tabs or runs of 2+ spaces, read
                   against the table's header names
"""

from __future__ import annotations

import re
from abc import ABC
from typing import Any, Sequence

from netops.domain.report import UNKNOWN_ERROR_TYPE
from netops.mappers.fields import canonical_field_for, parse_int, parse_pair, split_weekly_counts

COLUMN_SPLIT_RE = re.compile(r"\s*\|\s*|\t+|\s{2,}")

TIMESTAMP_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?"
    r"|(?<!\d)\d{1,2}/\d{1,2}/\d{4}(?:\s+\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AP]M)?)?",
    re.IGNORECASE,
)
OCCURRENCES_RE = re.compile(
    r"(\d[\d,]*)\s*(?:occurrences?|times|events?|incidents?|drops?|flaps?)\b",
    re.IGNORECASE,
)
ERRORS_RE = re.compile(r"(\d[\d,]*)\s*errors?\b", re.IGNORECASE)
CLIENTS_RE = re.compile(
    r"(\d[\d,]*)\s*(?:(?:impacted|affected|connected|concurrent|peak)\s+)?clients?\b",
    re.IGNORECASE,
)
DURATION_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*(?:min(?:ute)?s?\.?|h(?:ou)?rs?\b|sec(?:ond)?s?\b)",
    re.IGNORECASE,
)
TREND_RE = re.compile(r"(?<![\w/])[+-]?\d+(?:\.\d+)?\s*%")
IN_PAIR_RE = re.compile(r"\bin\b[^0-9]*(\d+(?:\.\d+)?\s*%?\s*/\s*\d+(?:\.\d+)?)", re.IGNORECASE)
OUT_PAIR_RE = re.compile(r"\bout\b[^0-9]*(\d+(?:\.\d+)?\s*%?\s*/\s*\d+(?:\.\d+)?)", re.IGNORECASE)

PROSE_RE = re.compile(
    r"^(?P<subject>.+?)\s+(?:experienced|reported|had|has|was|were|saw|showed)\s+"
    r"(?P<event>[^,;]+?)\s*(?:[,;]\s*(?P<rest>.*))?$",
    re.IGNORECASE,
)

SFS_SUBJECT_RE = re.compile(r"^(SFS[-_\s]?[A-Z]{3})(?:[-_\s]+(?P<device>\S.*))?$")
DEVICE_TOKEN_RE = re.compile(r"^(?=[\w.-]*[\d-])[A-Za-z0-9][\w.-]*$")
PORT_TOKEN_RE = re.compile(r"^(?:Gi|Fa|Te|Ge|Xe|Eth|Ethernet|wg|Port)[\w/.:-]*$", re.IGNORECASE)
BARE_INT_RE = re.compile(r"^\d[\d,]*$")
WORD_RE = re.compile(r"^[A-Za-z][A-Za-z&/_-]*$")

_TOKEN_EVIDENCE_FIELDS = ("device", "last_occurred", "occurrences", "errors", "impacted_clients", "avg_duration", "trend")

# Interface down, with timestamp and status:
#   ARVA2001 - South Bell as1-arva2001-e1516Switch08/20/2025 10:2250%OPEN40.1 min.3
INTERFACE_DOWN_DATED_RE = re.compile(
    r"^(?P<site>[A-Z0-9]+\s*-\s*[^-]+?)\s+(?P<device>[a-z0-9][\w-]*?)"
    r"(?P<interface>(?:Gi|Fa|Te|Eth)\d+(?:/\d+)*|[A-Z][A-Za-z]*)?"
    r"(?P<date>\d{2}/\d{2}/\d{4})\s+(?P<time>\d{2}:\d{2})"
    r"(?P<trend>[+-]?\d+(?:\.\d+)?%)(?P<status>[A-Z]+)?"
    r"(?P<avg_duration>\d+(?:\.\d+)?)\s*min\.?\s*(?P<occurrences>\d+)$"
)

# Interface down, three-part site with state suffix and no timestamp:
#   ARVA2001 - South Bell - Arlington VAas1-arva2001-w210616Trunk-24%34 min.3
INTERFACE_DOWN_UNDATED_RE = re.compile(
    r"^(?P<site>[A-Z0-9]+\s*-\s*[^-]+?\s*-\s*[A-Za-z .]+?\s[A-Z]{2})"
    r"(?P<device>[a-z][\w-]*?)"
    r"(?P<interface>Trunk|Gi\d+(?:/\d+)+|Fa\d+(?:/\d+)+|xDP|Ethernet\d*|Port\d*|wg\d+)"
    r"(?P<trend>[+-]?\d+(?:\.\d+)?%)(?P<avg_duration>\d+(?:\.\d+)?)\s*min\.?\s*(?P<occurrences>\d+)$"
)

#   ARVA1900 - 1900 Crystal Dr - ArlNorth_202association12%6828
WIFI_CONCAT_RE = re.compile(
    r"^(?P<site>[A-Z0-9]+\s*-\s*.+?)\s*-\s*(?P<device>[A-Za-z][\w.]*?)"
    r"(?P<error_type>(?i:association|authentication|dhcp|dns|snr|channel|roaming))"
    r"(?P<trend>[+-]?\d+(?:\.\d+)?%)(?P<occurrences>\d+)$"
)

#   ARVA1900 - 1900 Crystal Dr - Arlington VA-10%4756249625122605
CLIENTS_CONCAT_RE = re.compile(
    r"^(?P<site>[A-Z0-9]+\s*-\s*.+?)\s*"
    r"(?P<trend>[+-]\d+(?:\.\d+)?%|(?<=\s)\d+(?:\.\d+)?%)\s*"
    r"(?P<counts>\d[\d\s,]*)$"
)

#   SFS-LAX lax-sw2 Gi1/0/24 152 0.5 / 2.1 0.3 / 1.7
PORT_TAIL_RE = re.compile(
    r"^(?P<head>.+?)\s+(?P<errors>\d[\d,]*)\s+(?:(?P<error_rate>\d+(?:\.\d+)?%)\s+)?"
    r"(?P<in_avg>\d+(?:\.\d+)?)%?\s*/\s*(?P<in_max>\d+(?:\.\d+)?)%?\s+"
    r"(?P<out_avg>\d+(?:\.\d+)?)%?\s*/\s*(?P<out_max>\d+(?:\.\d+)?)%?$"
)


def split_columns(content: str) -> list[str]:
    return [cell.strip() for cell in COLUMN_SPLIT_RE.split(content.strip().strip("|")) if cell.strip()]


def looks_like_device(token: str) -> bool:
    return bool(DEVICE_TOKEN_RE.match(token))


def is_port_token(token: str) -> bool:
    return bool(PORT_TOKEN_RE.match(token)) and any(ch.isdigit() for ch in token)


def _is_device_token(token: str) -> bool:
    return looks_like_device(token) and not BARE_INT_RE.match(token) and not is_port_token(token)


def split_subject(subject: str) -> tuple[str, str | None]:
    """
    Split a prose subject into (site, device).

        "ATL-SW1"                               -> ("ATL", "ATL-SW1")
        "SFS-ATL atl-sw1"                       -> ("SFS-ATL", "atl-sw1")
        "ARVA2001 - South Bell - as2-arva2001"  -> ("ARVA2001 - South Bell", "as2-arva2001")
    """

    subject = " ".join(subject.split())

    if " - " in subject:
        head, _, tail = subject.rpartition(" - ")
        if looks_like_device(tail):
            return head, tail
        return subject, None

    sfs_match = SFS_SUBJECT_RE.match(subject)
    if sfs_match:
        return sfs_match.group(1), sfs_match.group("device")

    if " " not in subject:
        if "-" in subject:
            return subject.split("-", 1)[0], subject
        return subject, None

    tokens = subject.split(" ")
    if looks_like_device(tokens[-1]):
        return " ".join(tokens[:-1]), tokens[-1]
    return subject, None


def extract_text_metrics(text: str) -> dict[str, Any]:
    """
    Pull keyed numbers out of free text ("5 occurrences", "avg 12.3 min",
    "+12%", "8 clients", "40 errors").
    """

    fields: dict[str, Any] = {}
    occurrences = OCCURRENCES_RE.search(text)
    if occurrences:
        fields["occurrences"] = occurrences.group(1)
    errors = ERRORS_RE.search(text)
    if errors:
        fields["errors"] = errors.group(1)
    clients = CLIENTS_RE.search(text)
    if clients:
        fields["impacted_clients"] = clients.group(1)
    duration = DURATION_RE.search(text)
    if duration:
        fields["avg_duration"] = duration.group(0)
    trend = TREND_RE.search(text)
    if trend:
        fields["trend"] = trend.group(0)
    return fields


def clean_event(event: str) -> str:
    """
    Strip numbers and timestamps from a prose event phrase.
    """

    cleaned = event
    for pattern in (TIMESTAMP_RE, OCCURRENCES_RE, ERRORS_RE, CLIENTS_RE, DURATION_RE, TREND_RE):
        cleaned = pattern.sub(" ", cleaned)
    return " ".join(cleaned.split()).strip(" -:")


class RowMatcher(ABC):
    """
    Base matcher: prose and column layouts, plus family defaults.

    Subclasses add concatenated-layout patterns and family-specific fields.
    """

    family = "generic"
    default_error_type = UNKNOWN_ERROR_TYPE
    default_interface: str | None = None
    default_occurrences: int | None = None

    def match(self, content: str, columns: Sequence[str] = ()) -> dict[str, Any] | None:
        fields = self.extract(content, columns)
        if fields is None:
            return None
        return self.complete(fields, content)

    def extract(self, content: str, columns: Sequence[str] = ()) -> dict[str, Any] | None:
        text = " ".join(content.split()) if not COLUMN_SPLIT_RE.search(content) else content.strip()
        for strategy in (self.match_concatenated, self.match_prose):
            fields = strategy(" ".join(text.split()))
            if fields is not None:
                return fields
        return self.match_columns(text, columns)

    def match_concatenated(self, content: str) -> dict[str, Any] | None:
        return None

    def match_prose(self, content: str) -> dict[str, Any] | None:
        matched = PROSE_RE.match(content)
        if not matched:
            return None
        site, device = split_subject(matched.group("subject"))
        fields: dict[str, Any] = {"site": site, "device": device}
        event = clean_event(matched.group("event"))
        if event:
            fields["error_type"] = event
        fields.update(extract_text_metrics(content))
        return self.refine_prose(fields, content)

    def refine_prose(self, fields: dict[str, Any], content: str) -> dict[str, Any]:
        return fields

    def match_columns(self, content: str, columns: Sequence[str]) -> dict[str, Any] | None:
        cells = split_columns(content)
        if len(cells) < 2 or not columns:
            return None
        fields: dict[str, Any] = {}
        for header, cell in zip(columns, cells):
            fields[canonical_field_for(header)] = cell
        return fields

    def complete(self, fields: dict[str, Any], content: str) -> dict[str, Any]:
        """
        Fill family defaults and a timestamp found anywhere in `content`.
        """

        if not fields.get("last_occurred"):
            timestamp = TIMESTAMP_RE.search(content)
            if timestamp:
                fields["last_occurred"] = timestamp.group(0)
        if self.default_interface and not fields.get("interface"):
            fields["interface"] = self.default_interface
        if not fields.get("error_type"):
            fields["error_type"] = self.default_error_type
        if self.default_occurrences is not None and all(
            fields.get(name) in (None, "") for name in ("occurrences", "unreachable_count", "total")
        ):
            fields["occurrences"] = self.default_occurrences
        return fields


class DeviceDownMatcher(RowMatcher):
    """
    Interface down events, device availability, VPN tunnel down and other
    per-device incident tables.
    """

    family = "device_down"

    def __init__(self, error_type: str = "Interface Down") -> None:
        self.default_error_type = error_type

    def match_concatenated(self, content: str) -> dict[str, Any] | None:
        dated = INTERFACE_DOWN_DATED_RE.match(content)
        if dated:
            fields = dated.groupdict()
            fields["last_occurred"] = f"{fields.pop('date')} {fields.pop('time')}"
            status = fields.pop("status")
            if status:
                fields["status"] = status
            fields["error_type"] = self.default_error_type
            return fields
        undated = INTERFACE_DOWN_UNDATED_RE.match(content)
        if undated:
            fields = undated.groupdict()
            fields["error_type"] = self.default_error_type
            return fields
        return None


class WirelessMatcher(RowMatcher):
    family = "wireless"
    default_error_type = "Wi-Fi Error"
    default_interface = "Wi-Fi"

    def match_concatenated(self, content: str) -> dict[str, Any] | None:
        matched = WIFI_CONCAT_RE.match(content)
        if not matched:
            return None
        fields = matched.groupdict()
        fields["error_type"] = fields["error_type"].lower()
        return fields

    def refine_prose(self, fields: dict[str, Any], content: str) -> dict[str, Any]:
        if fields.get("occurrences") in (None, "") and fields.get("errors"):
            fields["occurrences"] = fields["errors"]
        return fields

    def complete(self, fields: dict[str, Any], content: str) -> dict[str, Any]:
        if fields.get("occurrences") in (None, "") and fields.get("total"):
            fields["occurrences"] = fields["total"]
        return super().complete(fields, content)


class PortErrorMatcher(RowMatcher):
    family = "port_errors"
    default_error_type = "Port Error"
    default_interface = "Port"

    def match_concatenated(self, content: str) -> dict[str, Any] | None:
        matched = PORT_TAIL_RE.match(content)
        if not matched:
            return None
        tokens = matched.group("head").split(" ")
        fields: dict[str, Any] = {}
        if len(tokens) > 1 and PORT_TOKEN_RE.match(tokens[-1]):
            fields["interface"] = tokens.pop()
        site, device = split_subject(" ".join(tokens))
        fields.update(
            {
                "site": site,
                "device": device,
                "errors": matched.group("errors"),
                "error_rate": matched.group("error_rate"),
                "in_avg_max": f"{matched.group('in_avg')}/{matched.group('in_max')}",
                "out_avg_max": f"{matched.group('out_avg')}/{matched.group('out_max')}",
            }
        )
        return fields

    def refine_prose(self, fields: dict[str, Any], content: str) -> dict[str, Any]:
        for pattern, name in ((IN_PAIR_RE, "in_avg_max"), (OUT_PAIR_RE, "out_avg_max")):
            pair = pattern.search(content)
            if pair and parse_pair(pair.group(1)) is not None:
                fields[name] = pair.group(1)
        if fields.get("trend") and not fields.get("error_rate"):
            fields["error_rate"] = fields.pop("trend")
        return fields


class UnreachableMatcher(RowMatcher):
    """
    Site unreachable events. A row is one event unless a count is given.
    """

    family = "unreachable"
    default_error_type = "Site Unreachable"
    default_occurrences = 1

    def refine_prose(self, fields: dict[str, Any], content: str) -> dict[str, Any]:
        if fields.get("error_type", "").lower() == "unreachable":
            fields["error_type"] = self.default_error_type
        return fields


class ConnectedClientsMatcher(RowMatcher):
    family = "connected_clients"
    default_error_type = "Client Load"
    default_interface = "Client Connection"

    def match_concatenated(self, content: str) -> dict[str, Any] | None:
        matched = CLIENTS_CONCAT_RE.match(content)
        if not matched:
            return None
        weekly = split_weekly_counts(matched.group("counts"))
        return {
            "site": matched.group("site"),
            "trend": matched.group("trend"),
            "clients_weekly": weekly,
        }

    def match_columns(self, content: str, columns: Sequence[str]) -> dict[str, Any] | None:
        fields = super().match_columns(content, columns)
        if fields is None:
            return None
        weekly = [fields.get(f"clients_week{week}") for week in range(1, 5)]
        if any(value not in (None, "") for value in weekly):
            fields["clients_weekly"] = [parse_int(value) for value in weekly if value not in (None, "")]
        return fields


class GenericMatcher(RowMatcher):
    """
    Fallback for any table.

    Column cells are read against the header when the line splits into at
    least two of them (or as device, type and count when no header is
    known). Anything else is read token by token on whitespace runs: the
    timestamp, the first device-like token, a port token, keyed metrics and
    the last bare integer as the count. Fields it cannot find stay unset and
    become sentinels in `build_canonical_row`.
    """

    family = "generic"

    def match_columns(self, content: str, columns: Sequence[str]) -> dict[str, Any] | None:
        cells = split_columns(content)
        if columns and len(cells) >= 2:
            return super().match_columns(content, columns)
        if not columns and len(cells) >= 3:
            device, error_type, count = cells[:3]
            return {"device": device, "error_type": error_type, "occurrences": count}
        return self.match_tokens(content)

    def match_tokens(self, content: str) -> dict[str, Any] | None:
        text = " ".join(content.split())
        fields: dict[str, Any] = {}

        timestamp = TIMESTAMP_RE.search(text)
        if timestamp:
            fields["last_occurred"] = timestamp.group(0)
            text = f"{text[: timestamp.start()]} {text[timestamp.end() :]}"

        fields.update(extract_text_metrics(text))
        for pattern in (OCCURRENCES_RE, ERRORS_RE, CLIENTS_RE, DURATION_RE, TREND_RE):
            text = pattern.sub(" ", text)
        tokens = text.split()

        device_index = next((index for index, token in enumerate(tokens) if _is_device_token(token)), None)
        rest = tokens
        if device_index is not None:
            end = device_index + 1
            if SFS_SUBJECT_RE.match(tokens[device_index]) and end < len(tokens) and _is_device_token(tokens[end]):
                end += 1
            site, device = split_subject(" ".join(tokens[:end]))
            if device is None and not SFS_SUBJECT_RE.match(site):
                site, device = " ".join(tokens[:device_index]), tokens[device_index]
            fields["site"], fields["device"] = site, device
            rest = tokens[end:]

        words: list[str] = []
        tail_count: str | None = None
        for token in rest:
            if is_port_token(token) and "interface" not in fields:
                fields["interface"] = token
            elif BARE_INT_RE.match(token):
                tail_count = token
            elif WORD_RE.match(token):
                words.append(token)
        if tail_count is not None and fields.get("occurrences") in (None, ""):
            fields["occurrences"] = tail_count

        if not any(fields.get(name) for name in _TOKEN_EVIDENCE_FIELDS):
            return None
        if words:
            fields["error_type"] = " ".join(words)
        return fields
