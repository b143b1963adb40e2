"""Pattern-subscribed dispatch of inbound chat lines."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Union

import structlog

logger = structlog.get_logger(__name__)

# handler(line, match) -> True to echo the line to the local display
ChatHandler = Callable[[str, re.Match[str]], bool]


@dataclass
class Subscription:
    pattern: re.Pattern[str]
    handler: ChatHandler


class ChatDispatcher:
    """Tests every inbound line against all subscribed patterns, in order.

    A line is echoed unless at least one matching handler vetoes it.
    """

    def __init__(self) -> None:
        self.subscriptions: List[Subscription] = []

    def subscribe(self, pattern: Union[str, re.Pattern[str]], handler: ChatHandler) -> Subscription:
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        sub = Subscription(pattern, handler)
        self.subscriptions.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        try:
            self.subscriptions.remove(sub)
        except ValueError:
            pass

    def dispatch(self, line: str) -> bool:
        """Run matching handlers for ``line`` and return whether to echo it."""
        text = line.rstrip("\r\n")
        echo = True
        for sub in list(self.subscriptions):
            m = sub.pattern.fullmatch(text)
            if m is None:
                continue
            try:
                if not sub.handler(text, m):
                    echo = False
            except Exception as e:
                logger.error("chat_handler_failed", pattern=sub.pattern.pattern, error=str(e))
        return echo
