import sys
from pathlib import Path


# Ensure src is importable
ROOT = Path(__file__).parent.parent
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))


from servertime.chat.patterns import (  # noqa: E402
    LB_HEADER_TIME_CHECK,
    is_no_results,
    match_time_check,
    parse_time_check_minutes,
)

HEADER = "Block changes from player watsonservertimecheck between 1552 and 1552 minutes ago in world:"


def test_time_check_header_extracts_first_number():
    assert parse_time_check_minutes(HEADER) == 1552


def test_accepts_existing_match():
    m = LB_HEADER_TIME_CHECK.fullmatch(HEADER)
    assert parse_time_check_minutes(m) == 1552


def test_uses_first_group_only():
    line = "Block changes from player watsonservertimecheck between 100 and 101 minutes ago in world:"
    assert parse_time_check_minutes(line) == 100


def test_other_players_do_not_match():
    line = "Block changes from player notch between 1552 and 1552 minutes ago in world:"
    assert match_time_check(line) is None
    assert parse_time_check_minutes(line) is None


def test_unrelated_lines_do_not_match():
    assert parse_time_check_minutes("No results found.") is None
    assert parse_time_check_minutes("<steve> hello") is None


def test_no_results():
    assert is_no_results("No results found.")
    assert not is_no_results("No results found")
    assert not is_no_results(HEADER)
