import pytest

import charger_uptime.data as data
from charger_uptime.uptime import Report, station_uptimes

from conftest import SAMPLE_INPUT


def _doc(stations: str, reports: str) -> str:
    return f"[Stations]\n{stations}\n[Charger Availability Reports]\n{reports}"


def test_parse_sample_input():
    result = data.parse_input(SAMPLE_INPUT)
    assert set(result) == {0, 1, 2}
    assert result[0] == [
        Report(0, 50000, True),
        Report(50000, 100000, True),
        Report(50000, 100000, True),
    ]
    assert result[1] == [Report(25000, 75000, False)]
    assert result[2][-1] == Report(100000, 200000, True)


def test_station_without_chargers_and_without_reports():
    result = data.parse_input(_doc("1\n2 20\n", "20 0 10 true\n"))
    assert result == {1: [], 2: [Report(0, 10, True)]}


def test_up_flag_parsing():
    result = data.parse_input(
        _doc("1 10\n", "10 0 1 TRUE\n10 1 2 false\n10 2 3 yes\n")
    )
    assert [r.up for r in result[1]] == [True, False, False]


def test_blank_report_lines_are_ignored():
    result = data.parse_input(_doc("1 10\n", "\n10 0 1 true\n\n"))
    assert result == {1: [Report(0, 1, True)]}


def test_full_unsigned_ranges():
    doc = _doc(
        "4294967295 4294967294\n",
        "4294967294 9223372036854775808 18446744073709551615 true\n",
    )
    result = data.parse_input(doc)
    assert result == {
        4294967295: [Report(2**63, 2**64 - 1, True)],
    }


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "formatted incorrectly"),
        ("[Charger Availability Reports]\n", "formatted incorrectly"),
        ("[Stations]\n1 10\n", "blank line"),
        ("[Stations]\n1 10\n\n10 0 1 true\n", "formatted incorrectly"),
        (_doc("x 10\n", ""), "32-bit"),
        (_doc("1 -10\n", ""), "32-bit"),
        (_doc("4294967296\n", ""), "32-bit"),
        (_doc("1 1_0\n", ""), "32-bit"),
        (_doc("1 10\n2 10\n", ""), "listed under stations"),
        (_doc("1 10\n", "10 0 1\n"), "must contain"),
        (_doc("1 10\n", "11 0 1 true\n"), "present at a station"),
        (_doc("1 10\n", "ten 0 1 true\n"), "Charger IDs"),
        (_doc("1 10\n", "10 -1 1 true\n"), "64-bit"),
        (_doc("1 10\n", "10 0 18446744073709551616 true\n"), "64-bit"),
        (_doc("1 10\n", "10 5 5 true\n"), "ends at or before"),
        (_doc("1 10\n", "10 6 5 true\n"), "ends at or before"),
    ],
)
def test_format_errors(text, message):
    with pytest.raises(data.FormatError, match=message):
        data.parse_input(text)


def test_fetch_input_from_file(sample_file):
    assert data.fetch_input(str(sample_file)) == SAMPLE_INPUT


def test_fetch_input_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        data.fetch_input(str(tmp_path / "missing.txt"))


def test_fetch_input_from_url(monkeypatch):
    calls = {}

    class _Response:
        text = SAMPLE_INPUT
        content = SAMPLE_INPUT.encode()

        def raise_for_status(self):
            pass

    def _get(url, timeout):
        calls["url"] = url
        calls["timeout"] = timeout
        return _Response()

    monkeypatch.setattr(data.requests, "get", _get)
    result = data.load_station_reports("https://example.com/input.txt")
    assert calls == {"url": "https://example.com/input.txt", "timeout": 30}
    assert set(result) == {0, 1, 2}


def test_station_with_chargers_but_no_reports():
    result = data.parse_input(_doc("1 10\n2 20\n", "10 0 5 true\n"))
    assert result == {1: [Report(0, 5, True)], 2: []}
    assert station_uptimes(result) == [(1, 100), (2, 0)]


def test_fields_separated_by_runs_of_whitespace():
    result = data.parse_input(_doc("1  10\t11\n", "10\t0  5 true\n11 5 10   false\n"))
    assert result == {1: [Report(0, 5, True), Report(5, 10, False)]}
