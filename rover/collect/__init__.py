# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

import os

from rover import _rover as _
from rover.collect.context import build_context
from rover.collect.dumper import Dumper
from rover.collect.plugin import CollectPluginBase
from rover.component import RoverComponent
from rover.utilities import ImporterHelper, import_module


def discover_plugins(logger=None):
    """Return the collection module classes found in rover.collect.plugins,
    sorted by module file name."""
    import rover.collect.plugins as pkg

    helper = ImporterHelper(pkg)
    plugins = []
    for mod_name in helper.get_modules():
        fq = f"{pkg.__name__}.{mod_name}"
        try:
            classes = import_module(fq, superclasses=(CollectPluginBase,))
        except Exception as e:
            if logger:
                logger.warning(f"plugin {mod_name} does not import: {e}")
            continue
        if not classes:
            continue
        # Each module should export exactly one CollectPluginBase subclass
        plugins.append(classes[0])
    return plugins


class RoverCollect(RoverComponent):
    """Run one collection module against the local host and store the raw
    command output below <outdir>/<hostname>/<module>/"""

    desc = "Collect diagnostics for a service module"
    config_section = "collect"

    def __init__(self, parser, args, cmdline, plugin_class, checker=None):
        super().__init__(parser, args, cmdline)
        self.plugin_class = plugin_class
        self.checker = checker
        self.context = None
        self.dumper = None
        self.outdir = None

    @property
    def module_name(self):
        return self.plugin_class.name()

    def _init_context(self):
        self.context = build_context(
            self.plugin_class.get_process_name(),
            checker=self.checker,
            logger=self.roverlog,
        )
        self.ui_log.info(f"[{self.module_name}] Hello from the rover "
                         f"{self.plugin_class.title()} module on "
                         f"{self.context.host_name}!")

    def _prepare_outdir(self):
        host_dir = os.path.join(self.opts.outdir, self.context.host_name)
        self.outdir = os.path.join(host_dir, self.module_name)
        try:
            os.makedirs(self.outdir, exist_ok=True)
        except OSError as e:
            self.roverlog.error(f"[{self.module_name}] Cannot create "
                                f"directory {self.outdir}: "
                                f"{e.strerror or e}")
            self._exit(1, _(f"Cannot create directory {self.outdir}"))
        self.dumper = Dumper(host_dir, self.roverlog,
                             timeout=self.opts.cmd_timeout)

    def _run_plugin(self):
        pname = self.module_name
        plugin = self.plugin_class(
            context=self.context,
            dumper=self.dumper,
            logger=self.roverlog,
        )
        plugin.advise()
        if not plugin.check_enabled():
            self.roverlog.warning(f"[{pname}] No {pname} process detected in "
                                  "this environment")
            return
        try:
            plugin.setup()
            plugin.collect()
        except KeyboardInterrupt:
            raise
        except Exception as e:
            self.roverlog.exception(f"[{pname}] collection failed: {e}")

    def execute(self):
        try:
            self._init_context()
            self._prepare_outdir()
            self._run_plugin()
            ok, total = self.dumper.summary(self.module_name)
            self.roverlog.debug(f"[{self.module_name}] {ok} of {total} "
                                "artifacts collected successfully")
            self.ui_log.info(_(f"Executed {self.plugin_class.title()} "
                               "commands and stored output"))
            return 0
        except KeyboardInterrupt:
            self.ui_log.error("\nExiting on user cancel")
            self._exit(130)
        except SystemExit:
            raise
        except Exception as e:
            self.ui_log.error(f"Error: {e}")
            if self.opts.debug:
                raise
        self._exit(1)
