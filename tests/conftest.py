# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

import logging
import sys
from argparse import Namespace

import pytest

from rover.collect.plugin import CollectPluginBase


class FakeChecker:
    """Stands in for ProcessChecker, recording the names asked for"""

    def __init__(self, running=True, error=None):
        self.running = running
        self.error = error
        self.asked = []

    def is_running(self, process_name):
        self.asked.append(process_name)
        if self.error:
            raise self.error
        return self.running


class RecordingDumper:
    """Stands in for Dumper, recording dump calls instead of running them"""

    def __init__(self):
        self.calls = []

    def dump(self, module_name, artifact_name, command, *args):
        self.calls.append((module_name, artifact_name, command) + args)


class EchoPlugin(CollectPluginBase):
    """Collection module running the test interpreter instead of a
    service binary"""

    plugin_name = "echo"
    description = "Execute Echo related commands and store output"
    process_name = "echo-service"
    binary = sys.executable
    token_env = "ROVER_TEST_ECHO_TOKEN"

    commands = (
        ("echo_status", ("-c", "print('status ok')")),
        ("echo_version", ("-c", "import sys; sys.stderr.write('v1\\n')")),
    )


@pytest.fixture(autouse=True)
def reset_rover_logging():
    yield
    for name in ("rover", "rover_ui"):
        log = logging.getLogger(name)
        for handler in list(log.handlers):
            log.removeHandler(handler)
            handler.close()


@pytest.fixture
def logger():
    log = logging.getLogger("rover.tests")
    log.setLevel(logging.DEBUG)
    return log


@pytest.fixture
def make_args(tmp_path):
    def _make_args(**kwargs):
        values = {
            "outdir": str(tmp_path),
            "log_file": "",
            "config_file": str(tmp_path / "missing.conf"),
        }
        values.update(kwargs)
        return Namespace(**values)
    return _make_args


@pytest.fixture
def testhost(monkeypatch):
    monkeypatch.setattr("rover.collect.context.get_hostname",
                        lambda: "testhost")
    return "testhost"


def records_at(caplog, level, name_prefix="rover"):
    return [r for r in caplog.records
            if r.levelno == level and r.name.startswith(name_prefix)]
