"""Append-only, timestamped diagnostic channels"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from rich.console import Console

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogChannel:
    """Named diagnostic trail for one session

    Entries are never rotated or trimmed; the channel lives as long as the
    session that owns it.
    """

    def __init__(
        self,
        name: str,
        visible: bool = True,
        clear_with_session: bool = False,
        console: Optional[Console] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.name = name
        self.visible = visible
        self.clear_with_session = clear_with_session
        self._console = console
        self._clock = clock
        self._entries: List[str] = []

    def write(self, message: str) -> str:
        """Append "{timestamp}:{message}\\n" and return the entry"""
        entry = f"{self._clock().strftime(TIMESTAMP_FORMAT)}:{message}\n"
        self._entries.append(entry)

        if self.visible and self._console is not None:
            self._console.print(entry, end="", markup=False, highlight=False)

        return entry

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def text(self) -> str:
        return "".join(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, fragment: str) -> bool:
        return any(fragment in entry for entry in self._entries)


class LogSink:
    """Registry of log channels keyed by logical name"""

    def __init__(
        self,
        console: Optional[Console] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.console = console
        self._clock = clock
        self._channels: Dict[str, LogChannel] = {}

    def create_channel(
        self,
        name: str,
        visible: bool = True,
        clear_with_session: bool = False
    ) -> LogChannel:
        """Create a channel, or return the existing one with that name"""
        channel = self._channels.get(name)
        if channel is None:
            channel = LogChannel(
                name,
                visible=visible,
                clear_with_session=clear_with_session,
                console=self.console,
                clock=self._clock
            )
            self._channels[name] = channel
            logger.debug(f"Created log channel '{name}'")
        return channel

    def get(self, name: str) -> Optional[LogChannel]:
        return self._channels.get(name)

    def write(self, channel: str, message: str) -> str:
        """Write to a channel by name, creating it on first use"""
        return self.create_channel(channel).write(message)

    def reset_session(self) -> None:
        """Clear channels that asked to be cleared with the session"""
        for channel in self._channels.values():
            if channel.clear_with_session:
                channel.clear()

    @property
    def channel_names(self) -> List[str]:
        return list(self._channels)
