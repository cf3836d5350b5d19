# This file is part of the rover project
#
# Command dumper for collection modules.
#
# A dump runs one external command without a shell, captures its combined
# stdout/stderr and writes the raw bytes to
#   <basedir>/<module>/<artifact>.txt
# Every failure is logged and swallowed so the remaining commands of a
# module still run.

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from rover.utilities import get_command_output


@dataclass(frozen=True)
class CapturedOutput:
    module_name: str
    artifact_name: str
    command: str
    args: Tuple[str, ...]
    output: bytes = field(repr=False)
    status: Optional[int]
    succeeded: bool


def write_file(path: str, data: bytes):
    """Write 'data' verbatim to 'path', replacing any previous content."""
    with open(path, "wb") as fp:
        fp.write(data)


class Dumper:
    """Run commands and store their output under 'basedir'.

    The per-module directories below 'basedir' must already exist.
    """

    def __init__(self, basedir, logger, timeout=300):
        self.basedir = basedir
        self.logger = logger
        self.timeout = timeout
        self.captured: List[CapturedOutput] = []
        self._artifacts: Set[Tuple[str, str]] = set()

    def artifact_path(self, module_name: str, artifact_name: str) -> str:
        return os.path.join(self.basedir, module_name, f"{artifact_name}.txt")

    def dump(self, module_name: str, artifact_name: str, command: str,
             *args: str) -> None:
        """Execute 'command' with 'args' and write the output to the
        artifact file. Never raises."""
        argv = [command, *args]
        cmdstr = shlex.join(argv)
        prefix = f"[{module_name}]"

        if (module_name, artifact_name) in self._artifacts:
            self.logger.error(f"{prefix} artifact '{artifact_name}' already "
                              f"collected in this run, skipping '{cmdstr}'")
            return
        self._artifacts.add((module_name, artifact_name))

        self.logger.info(f"{prefix} collecting '{cmdstr}'")
        result = get_command_output(argv, timeout=self.timeout)
        status = result['status']

        if 'error' in result:
            self.logger.warning(f"{prefix} could not execute '{cmdstr}' for "
                                f"{artifact_name}: {result['error']}")
            self._record(module_name, artifact_name, argv, b'', None, False)
            return

        succeeded = status == 0
        if result.get('timeout'):
            self.logger.warning(f"{prefix} command '{cmdstr}' timed out "
                                f"after {self.timeout}s, storing partial "
                                f"output in {artifact_name}")
        elif not succeeded:
            self.logger.warning(f"{prefix} command '{cmdstr}' exited with "
                                f"status {status} for {artifact_name}")

        dest = self.artifact_path(module_name, artifact_name)
        try:
            write_file(dest, result['output'])
        except OSError as e:
            self.logger.error(f"{prefix} unable to write {dest}: "
                              f"{e.strerror or e}")
            succeeded = False
        else:
            self.logger.debug(f"{prefix} wrote {dest}")

        self._record(module_name, artifact_name, argv, result['output'],
                     status, succeeded)

    def _record(self, module_name, artifact_name, argv, output, status,
                succeeded):
        self.captured.append(CapturedOutput(
            module_name=module_name,
            artifact_name=artifact_name,
            command=argv[0],
            args=tuple(argv[1:]),
            output=output,
            status=status,
            succeeded=succeeded,
        ))

    def summary(self, module_name: Optional[str] = None) -> Tuple[int, int]:
        """Return (succeeded, attempted) counts, optionally for one module."""
        records = [c for c in self.captured
                   if module_name is None or c.module_name == module_name]
        return sum(1 for c in records if c.succeeded), len(records)
