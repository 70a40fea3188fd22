"""Application entry point: wires config, session, interpreter and console."""

from __future__ import annotations

import asyncio
import sys

from .commands.interpreter import CommandInterpreter
from .config.config_loader import ConfigLoader
from .constants import APP_BANNER, STATUS_TARGET
from .errors.handling import log_error
from .irc.session import IRCSession
from .logging_config import LoggerConfigurator
from .logs.logger import logger
from .ui.console import ConsoleFrontend


async def main(
    frontend: ConsoleFrontend | None = None,
    reader: asyncio.StreamReader | None = None,
) -> None:
    """Run one interactive client session until the user quits."""
    frontend = frontend or ConsoleFrontend()
    logger.log_event("app", "start", version=APP_BANNER)
    frontend.append_line(STATUS_TARGET, APP_BANNER)

    config = ConfigLoader(
        report=lambda text: frontend.append_line(STATUS_TARGET, text)
    ).get_configuration()

    session = IRCSession(config, frontend)
    interpreter = CommandInterpreter(session)
    frontend.set_switch_listener(session.on_target_switched)
    session.on_target_switched(STATUS_TARGET)

    try:
        if config.server:
            await session.connect()
        await frontend.run(session, interpreter, reader)
    finally:
        if not session.closed.is_set():
            await session.quit()
        logger.log_event("app", "stop")


def run() -> None:
    LoggerConfigurator().configure()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted")
        sys.exit(0)
    except Exception as e:
        log_error("Top-level error", e)
        sys.exit(1)


if __name__ == "__main__":
    run()
