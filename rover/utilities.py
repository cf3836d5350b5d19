# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

import errno
import inspect
import os
import pkgutil
import signal
import socket
import subprocess
from importlib import import_module as _import_module

# exit statuses reported for commands that never produced a process,
# matching what a POSIX shell would report
STATUS_TIMEOUT = 124
STATUS_NOT_EXECUTABLE = 126
STATUS_NOT_FOUND = 127

# seconds allowed to collect remaining output after a timed out command
# has been killed
DRAIN_TIMEOUT = 5


def file_exists(path):
    """Return True if 'path' exists. Errors other than a missing path are
    reported as non-existence as well."""
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def get_hostname():
    return socket.gethostname()


def get_command_output(argv, timeout=300):
    """Execute the argv vector without a shell and return a dict with the
    combined stdout/stderr as bytes.

    Keys:
      status:  exit status, 124 on timeout, 126/127 if the command could
               not be spawned
      output:  captured bytes (possibly partial on timeout)
      error:   only present when the command could not be spawned
      timeout: only present (True) when the command was killed on timeout
    """
    if not timeout:
        timeout = None
    try:
        p = subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )
    except OSError as e:
        if e.errno == errno.ENOENT:
            status = STATUS_NOT_FOUND
        else:
            status = STATUS_NOT_EXECUTABLE
        return {'status': status, 'output': b'', 'error': e.strerror or str(e)}

    try:
        stdout, _ = p.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        # the command may have started children of its own that still hold
        # the output pipe, so the whole session is killed
        try:
            os.killpg(p.pid, signal.SIGKILL)
        except OSError:
            p.kill()
        try:
            stdout, _ = p.communicate(timeout=DRAIN_TIMEOUT)
        except subprocess.TimeoutExpired:
            p.stdout.close()
            p.wait()
            stdout = b''
        return {'status': STATUS_TIMEOUT, 'output': stdout or b'',
                'timeout': True}
    return {'status': p.returncode, 'output': stdout or b''}


def import_module(module_fqname, superclasses=None):
    """Import the module and return the classes defined in it that are
    subclasses of 'superclasses' (but not the superclasses themselves)."""
    module = _import_module(module_fqname)
    modules = [class_ for cname, class_ in
               inspect.getmembers(module, inspect.isclass)
               if class_.__module__ == module_fqname]
    if superclasses:
        modules = [m for m in modules if issubclass(m, superclasses)]
    return modules


class ImporterHelper:
    """Provides a list of modules that can be imported in a package.
    Importable modules are located along the module __path__ list and
    modules are files that end in '.py'.
    """

    def __init__(self, package):
        """package is a package module
        import my.package.module
        helper = ImporterHelper(my.package.module)"""
        self.package = package

    def get_modules(self):
        """Returns the list of importable modules in the configured python
        package, sorted by name."""
        names = set()
        for path in getattr(self.package, '__path__', []):
            for _, modname, ispkg in pkgutil.iter_modules([path]):
                if not ispkg and not modname.startswith('_'):
                    names.add(modname)
        return sorted(names)

# vim: set et ts=4 sw=4 :
