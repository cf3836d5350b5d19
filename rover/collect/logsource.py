# This file is part of the rover project
#
# Resolve where a module's messages can be found in the system log.
#
# System log naming is not portable across Unix-like systems:
#   - darwin:         /var/log/system.log
#   - linux, freebsd: /var/log/syslog when present, else /var/log/messages
#   - anything else:  no known location, the log step is skipped

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from rover.collect.context import Platform
from rover.utilities import file_exists

DARWIN_SYSTEM_LOG = "/var/log/system.log"
SYSLOG = "/var/log/syslog"
MESSAGES = "/var/log/messages"


@dataclass(frozen=True)
class LogSourceChoice:
    command: str
    args: Tuple[str, ...]

    @property
    def path(self) -> str:
        return self.args[-1]


def _grep(keyword: str, path: str) -> LogSourceChoice:
    return LogSourceChoice(command="grep", args=("-w", keyword, path))


def _darwin(keyword: str, exists: Callable[[str], bool]) -> LogSourceChoice:
    return _grep(keyword, DARWIN_SYSTEM_LOG)


def _syslog_or_messages(keyword: str,
                        exists: Callable[[str], bool]) -> LogSourceChoice:
    # only /var/log/syslog is probed; messages is the unconditional fallback
    if exists(SYSLOG):
        return _grep(keyword, SYSLOG)
    return _grep(keyword, MESSAGES)


_RESOLVERS = {
    Platform.DARWIN: _darwin,
    Platform.LINUX: _syslog_or_messages,
    Platform.FREEBSD: _syslog_or_messages,
}


def resolve_log_source(platform: Platform, keyword: str,
                       exists: Callable[[str], bool] = file_exists
                       ) -> Optional[LogSourceChoice]:
    """Return the command extracting 'keyword' lines from the system log on
    'platform', or None if the platform has no known log location.

    'exists' is only consulted on linux and freebsd.
    """
    resolver = _RESOLVERS.get(platform)
    if resolver is None:
        return None
    return resolver(keyword, exists)
