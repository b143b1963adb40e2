"""LogBlock chat header patterns used by the server time probe.

Server emits, for the probe query:
 - Block changes from player watsonservertimecheck between <n> and <n> minutes ago in world:
 - No results found.

The player name is longer than any real Minecraft name (16 chars max), so the
query always comes back empty and the "No results found." line follows the
header.
"""

from __future__ import annotations

import re
from typing import Optional, Union

PROBE_PLAYER = "watsonservertimecheck"

LB_HEADER_TIME_CHECK = re.compile(
    r"^Block changes from player " + PROBE_PLAYER
    + r" between (\d+) and (\d+) minutes ago in world:.*$"
)

LB_HEADER_NO_RESULTS = re.compile(r"^No results found\.$")


def match_time_check(line: str) -> Optional[re.Match[str]]:
    return LB_HEADER_TIME_CHECK.fullmatch(line.strip())


def parse_time_check_minutes(source: Union[str, re.Match[str]]) -> Optional[int]:
    """Extract the server-side "minutes ago" value from a time check header.

    Accepts either the raw line or an existing match. Returns None when the
    line is not a time check header. Only the first number is used; the
    second one is the same value because the query window is one second wide.
    """
    m = source if isinstance(source, re.Match) else match_time_check(source)
    if m is None:
        return None
    return int(m.group(1))


def is_no_results(line: str) -> bool:
    return LB_HEADER_NO_RESULTS.fullmatch(line.strip()) is not None
