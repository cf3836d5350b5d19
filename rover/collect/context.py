# This file is part of the rover project
#
# Module context for a collection run: which host we are on, which
# platform family it belongs to, and whether the module's service process
# was found running. Built once at the start of a run and never modified.

import enum
import sys
from dataclasses import dataclass
from typing import Optional

from rover.process import ProcessChecker, ProcessCheckError
from rover.utilities import get_hostname


class Platform(enum.Enum):
    DARWIN = "darwin"
    LINUX = "linux"
    FREEBSD = "freebsd"
    OTHER = "other"

    @classmethod
    def from_string(cls, value: str) -> "Platform":
        """Map a sys.platform style string onto a Platform.

        FreeBSD reports its major version (e.g. 'freebsd13'), so only the
        prefix is compared there.
        """
        if value == "darwin":
            return cls.DARWIN
        if value.startswith("linux"):
            return cls.LINUX
        if value.startswith("freebsd"):
            return cls.FREEBSD
        return cls.OTHER

    @classmethod
    def current(cls) -> "Platform":
        return cls.from_string(sys.platform)


@dataclass(frozen=True)
class ModuleContext:
    host_name: str
    platform: Platform
    process_detected: bool


def detect_process(process_name: str, checker: Optional[ProcessChecker] = None,
                   logger=None) -> bool:
    """Return True if 'process_name' is running. Inspection failures are
    logged and reported as not running."""
    checker = checker or ProcessChecker()
    try:
        return checker.is_running(process_name)
    except ProcessCheckError as e:
        if logger:
            logger.warning(f"[{process_name}] process check failed, "
                           f"assuming not running: {e}")
        return False


def build_context(process_name: str,
                  checker: Optional[ProcessChecker] = None,
                  platform: Optional[Platform] = None,
                  host_name: Optional[str] = None,
                  logger=None) -> ModuleContext:
    """
    Detect and return the ModuleContext for a module run.

    Parameters:
      process_name: executable name of the service to look for
      checker: ProcessChecker to use; a default one is created if omitted
      platform: override for the detected Platform
      host_name: override for the local host name
      logger: optional logger for process check failures
    """
    detected = detect_process(process_name, checker=checker, logger=logger)
    return ModuleContext(
        host_name=host_name or get_hostname(),
        platform=platform or Platform.current(),
        process_detected=detected,
    )
