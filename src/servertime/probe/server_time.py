"""Server time offset discovery.

Uses a LogBlock query to learn the local time at the server. The query is
issued once per server. It uses a player name longer than 16 characters so
no results will ever be found and a one second time span so the database
does essentially no work. The result header looks like:

    Block changes from player watsonservertimecheck between 1552 and 1552 minutes ago in world:

and is always followed by "No results found.", which is hidden from the
user because the probe triggered it.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Optional, Set

import structlog

from ..chat.dispatcher import ChatDispatcher
from ..chat.patterns import LB_HEADER_NO_RESULTS, LB_HEADER_TIME_CHECK, parse_time_check_minutes
from ..time.arithmetic import (
    format_month_day_time,
    local_now,
    minutes_between,
    offset_to_absolute_instant,
    reference_instant,
)
from ..time.offsets import OffsetStore
from .strategy import LogBlockProbeStrategy, ProbeStrategy

logger = structlog.get_logger(__name__)


class ServerTime:
    """Tracks how many minutes local time is ahead of each server's time.

    Collaborators are injected:
      endpoint_lookup() -> Optional[str]   currently connected server id
      send_probe(text)                     send a chat line to the server
      display(text)                        write a line to the local chat view
      clock() -> datetime                  local wall clock
    """

    def __init__(
        self,
        endpoint_lookup: Callable[[], Optional[str]],
        send_probe: Callable[[str], None],
        display: Callable[[str], None],
        dispatcher: Optional[ChatDispatcher] = None,
        strategy: Optional[ProbeStrategy] = None,
        store: Optional[OffsetStore] = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.endpoint_lookup = endpoint_lookup
        self.send_probe = send_probe
        self.display = display
        self.strategy = strategy or LogBlockProbeStrategy()
        self.store = store if store is not None else OffsetStore()
        self.clock = clock

        # If True, the server time is shown as soon as the probe resolves.
        self.show_server_time = False
        # If True, the next "No results found." line is echoed. Cleared by the
        # time check header so the probe's own empty result is hidden.
        self.echo_next_no_results = True
        # Endpoints a probe has been sent for, answered or not.
        self._probed: Set[str] = set()

        self.lock = threading.RLock()

        if dispatcher is not None:
            self.register(dispatcher)

    def register(self, dispatcher: ChatDispatcher) -> None:
        dispatcher.subscribe(LB_HEADER_TIME_CHECK, self.on_time_check)
        dispatcher.subscribe(LB_HEADER_NO_RESULTS, self.on_no_results)

    def get_offset_minutes(self) -> int:
        """Minutes that local time is ahead of the current server (negative if behind).

        Returns 0 while disconnected or before the probe has been answered.
        """
        endpoint = self.endpoint_lookup()
        if endpoint is None:
            return 0
        offset = self.store.get(endpoint)
        return offset if offset is not None else 0

    def ensure_offset_known(self, display_when_resolved: bool = False) -> None:
        """Send the probe for the current server unless its offset is known.

        When the offset is already known and ``display_when_resolved`` is set,
        the server time is shown immediately instead.
        """
        endpoint = self.endpoint_lookup()
        if endpoint is None:
            return

        with self.lock:
            if self.store.get(endpoint) is not None:
                if display_when_resolved:
                    self.show_current_server_time()
                return
            if endpoint in self._probed:
                # Still waiting for the answer; a second probe would only
                # produce duplicate chat traffic.
                self.show_server_time |= display_when_resolved
                return

            query = self.strategy.build_request(reference_instant(self.clock()))
            logger.debug("server_time_query", endpoint=endpoint, query=query)
            self.show_server_time = display_when_resolved
            self._probed.add(endpoint)

        try:
            self.send_probe(query)
        except (OSError, ConnectionError) as e:
            logger.warning("server_time_query_failed", endpoint=endpoint, error=str(e))

    def on_time_check(self, line: str, m) -> bool:
        """Handle the probe's result header. Never echoed."""
        endpoint = self.endpoint_lookup()
        if endpoint is None:
            return False

        with self.lock:
            if self.store.get(endpoint) is not None:
                return False
            try:
                server_minutes = parse_time_check_minutes(m)
            except ValueError as e:
                logger.warning("server_time_parse_failed", endpoint=endpoint, line=line, error=str(e))
                return False
            if server_minutes is None:
                return False

            # Express the reference instant as minutes behind local time.
            now = self.clock()
            local_minutes = minutes_between(now, reference_instant(now))

            # Positive if local time is ahead of the server.
            local_minus_server = local_minutes - server_minutes
            self.store.put_if_absent(endpoint, local_minus_server)
            logger.debug(
                "server_time_resolved",
                endpoint=endpoint,
                server_minutes=server_minutes,
                local_minutes=local_minutes,
                local_minus_server=local_minus_server,
            )

            if self.show_server_time:
                self.show_current_server_time()
                self.show_server_time = False

            # Suppress the subsequent "No results found.".
            self.echo_next_no_results = False
        return False

    def on_no_results(self, line: str, m) -> bool:
        """Echo "No results found." unless it belongs to the probe."""
        with self.lock:
            echo = self.echo_next_no_results
            self.echo_next_no_results = True
        return echo

    def show_current_server_time(self) -> None:
        """Display the current time at the server. Requires a known offset."""
        endpoint = self.endpoint_lookup()
        if endpoint is None:
            return
        offset = self.store.get(endpoint)
        if offset is None:
            return
        server_now = offset_to_absolute_instant(offset, self.clock())
        self.display(format_month_day_time(server_now))
