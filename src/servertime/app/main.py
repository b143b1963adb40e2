import argparse
import asyncio
import sys
import threading
from typing import Optional

from ..api.wire import ChatConnection, LocalOutput
from ..chat.dispatcher import ChatDispatcher
from ..config.settings import settings
from ..probe.server_time import ServerTime
from ..utils.logging_config import get_logger, setup_logging


def forward_stdin(conn: ChatConnection, loop: asyncio.AbstractEventLoop) -> None:
    """Send lines typed locally to the server until stdin closes."""
    for line in sys.stdin:
        text = line.rstrip("\n")
        if text:
            loop.call_soon_threadsafe(conn.send_line, text)


async def run_client(host: str, port: int, show_server_time: bool) -> None:
    dispatcher = ChatDispatcher()
    conn = ChatConnection(host, port, dispatcher, output=LocalOutput())
    server_time = ServerTime(
        endpoint_lookup=conn.current_endpoint_id,
        send_probe=conn.send_probe,
        display=conn.output,
        dispatcher=dispatcher,
    )

    await conn.connect()
    logger = get_logger(__name__, endpoint=conn.current_endpoint_id())
    logger.info("querying_server_time", show=show_server_time)
    # Query once at login.
    server_time.ensure_offset_known(display_when_resolved=show_server_time)
    await conn.drain()

    threading.Thread(target=forward_stdin, args=(conn, asyncio.get_running_loop()), daemon=True).start()
    await conn.run()


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Chat client that learns the server's local time")
    parser.add_argument("--host", default=settings.SERVERTIME_HOST, help="Server host")
    parser.add_argument("--port", type=int, default=settings.SERVERTIME_PORT, help="Server port")
    parser.add_argument("--no-show", action="store_true", help="Don't display the server time on connect")
    parser.add_argument("--log-level", default=settings.SERVERTIME_LOG_LEVEL, help="Logging level")
    args = parser.parse_args(argv)

    logger = setup_logging(
        args.log_level,
        endpoint=f"{args.host}:{args.port}",
        component="client",
        log_path=settings.SERVERTIME_LOG_PATH,
    )
    show = settings.SERVERTIME_SHOW_ON_CONNECT and not args.no_show
    logger.info("starting", show_server_time=show)
    try:
        asyncio.run(run_client(args.host, args.port, show))
    except KeyboardInterrupt:
        pass

