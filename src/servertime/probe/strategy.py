"""Probe strategies: how a time probe request is phrased for a server.

A strategy turns the reference instant into the single chat line that is
sent to the server. The response side is handled by the patterns that
ServerTime subscribes to.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..chat.patterns import PROBE_PLAYER


class ProbeStrategy(Protocol):
    def build_request(self, reference: datetime) -> str:
        ...


class LogBlockProbeStrategy:
    """Ask LogBlock for block changes of a non-existent player.

    The one second window starting at midnight of the reference day keeps
    the database work negligible. The header of the (empty) result reports
    how many minutes ago that midnight was on the server.
    """

    QUERY = "/lb player {player} since {date} 00:00:00 before {date} 00:00:01 limit 1"

    def __init__(self, player: str = PROBE_PLAYER):
        self.player = player

    @staticmethod
    def format_date(day: datetime) -> str:
        # D.M.YYYY, no zero padding
        return f"{day.day}.{day.month}.{day.year}"

    def build_request(self, reference: datetime) -> str:
        return self.QUERY.format(player=self.player, date=self.format_date(reference))
