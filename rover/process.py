# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

import os

import psutil


class ProcessCheckError(Exception):
    """The live process table could not be inspected"""


class ProcessChecker:
    """Look up running processes by executable name.

    A process matches only when its name, as reported by psutil, is exactly
    equal to the requested name. Command lines are never searched, so a
    'rover nomad' invocation or a 'nomad-driver-podman' helper does not count
    as a running 'nomad'. The calling process is always skipped.
    """

    def __init__(self, own_pid=None):
        self.own_pid = own_pid if own_pid is not None else os.getpid()

    def is_running(self, process_name):
        try:
            for proc in psutil.process_iter(["pid", "name"]):
                info = proc.info
                if info.get("pid") == self.own_pid:
                    continue
                if info.get("name") == process_name:
                    return True
        except (psutil.Error, OSError) as e:
            raise ProcessCheckError(
                f"unable to enumerate processes: {e}"
            ) from e
        return False

# vim: set et ts=4 sw=4 :
