import calendar
import re

import pytest

from stampgen.errors import InvalidResult, MissingInput
from stampgen.formatter import FormatStyle, describe_relative, format_timestamp

MARKUP_RE = re.compile(r"^<t:\d+(:[tTdDfFR])?>$")

# 2025-03-05 20:05:09 UTC, a Wednesday
INSTANT = calendar.timegm((2025, 3, 5, 20, 5, 9))


def texts(rows):
    return {row.style: row.text for row in rows}


def test_rows_are_in_fixed_order():
    rows = format_timestamp(INSTANT, "UTC", now=INSTANT)
    assert len(rows) == 8
    assert [row.style.code for row in rows] == ["", "t", "T", "d", "D", "f", "F", "R"]
    assert [row.style.label for row in rows] == [
        "Default",
        "Short Time",
        "Long Time",
        "Short Date",
        "Long Date",
        "Short Date/Time",
        "Long Date/Time",
        "Relative Time",
    ]


def test_markup_tokens():
    rows = format_timestamp(INSTANT, "UTC", now=INSTANT)
    assert rows[0].markup == f"<t:{INSTANT}>"
    assert rows[7].markup == f"<t:{INSTANT}:R>"
    for row in rows:
        assert MARKUP_RE.match(row.markup)


def test_renders_in_new_york():
    rows = texts(format_timestamp(INSTANT, "America/New_York", now=INSTANT))
    assert rows[FormatStyle.DEFAULT] == "March 5, 2025 at 3:05 PM"
    assert rows[FormatStyle.SHORT_TIME] == "3:05 PM"
    assert rows[FormatStyle.LONG_TIME] == "3:05:09 PM"
    assert rows[FormatStyle.SHORT_DATE] == "3/5/2025"
    assert rows[FormatStyle.LONG_DATE] == "March 5, 2025"
    assert rows[FormatStyle.SHORT_DATE_TIME] == "March 5, 2025 at 3:05 PM"
    assert rows[FormatStyle.LONG_DATE_TIME] == "Wednesday, March 5, 2025 at 3:05 PM"
    assert rows[FormatStyle.RELATIVE_TIME] == "a few seconds ago"


def test_time_zone_can_change_the_date():
    rows = texts(format_timestamp(INSTANT, "Asia/Tokyo", now=INSTANT))
    assert rows[FormatStyle.SHORT_TIME] == "5:05 AM"
    assert rows[FormatStyle.SHORT_DATE] == "3/6/2025"
    assert rows[FormatStyle.LONG_DATE_TIME] == "Thursday, March 6, 2025 at 5:05 AM"


def test_midnight_is_twelve_am():
    rows = texts(format_timestamp(0, "UTC", now=0))
    assert rows[FormatStyle.SHORT_TIME] == "12:00 AM"
    assert rows[FormatStyle.LONG_TIME] == "12:00:00 AM"
    assert rows[FormatStyle.SHORT_DATE] == "1/1/1970"
    assert rows[FormatStyle.LONG_DATE_TIME] == "Thursday, January 1, 1970 at 12:00 AM"


def test_relative_row_uses_now():
    rows = texts(format_timestamp(INSTANT, "UTC", now=INSTANT - 3 * 86400))
    assert rows[FormatStyle.RELATIVE_TIME] == "in 3 days"


def test_every_style_renders_from_the_same_arguments():
    rows = format_timestamp(INSTANT, "UTC", now=INSTANT - 7200)
    assert [row.text for row in rows] == [
        "March 5, 2025 at 8:05 PM",
        "8:05 PM",
        "8:05:09 PM",
        "3/5/2025",
        "March 5, 2025",
        "March 5, 2025 at 8:05 PM",
        "Wednesday, March 5, 2025 at 8:05 PM",
        "in 2 hours",
    ]


@pytest.mark.parametrize(
    "diff, expected",
    [
        (0, "a few seconds ago"),
        (59, "in a few seconds"),
        (-59, "a few seconds ago"),
        (60, "in 1 minute"),
        (-60, "1 minute ago"),
        (-150, "2 minutes ago"),
        (5400, "in 1 hour"),
        (-3661, "1 hour ago"),
        (7200, "in 2 hours"),
        (-86400, "1 day ago"),
        (29 * 86400, "in 29 days"),
        (30 * 86400, "in 1 month"),
        (-61 * 86400, "2 months ago"),
        (365 * 86400, "in 11 months"),
        (-366 * 86400, "1 year ago"),
        (3 * 366 * 86400, "in 3 years"),
    ],
)
def test_describe_relative(diff, expected):
    assert describe_relative(diff) == expected


@pytest.mark.parametrize("seconds", [-1, 253402300800, 1.5, "123", True])
def test_rejects_invalid_timestamps(seconds):
    with pytest.raises(InvalidResult):
        format_timestamp(seconds, "UTC")


def test_rejects_unknown_zone():
    with pytest.raises(MissingInput):
        format_timestamp(INSTANT, "Atlantis/Capital")
