# This file is part of the rover project
#
# Base class for rover collection modules.

import os
import re

from rover.collect.logsource import resolve_log_source
from rover.utilities import file_exists


class CollectPluginBase:
    """Base class for collection modules (one per service, e.g. nomad).

    Subclasses normally only declare metadata:
      - commands: ordered (artifact_name, args) pairs run against `binary`
      - token_env: credential variable whose absence is noted
    Optionally override:
      - setup(): perform any pre-collection initialization
      - collect(): replace the default command sequence
    """

    plugin_name = None
    description = "No description provided"
    # service executable looked for in the process table, defaults to name()
    process_name = None
    # binary the fixed commands are run with, defaults to name()
    binary = None
    # word grepped for in the system log, defaults to name()
    log_keyword = None
    token_env = None
    commands = ()

    def __init__(self, context, dumper, logger):
        """
        Args:
          context: ModuleContext of this run
          dumper:  Dumper writing below the host output directory
          logger:  rover logger instance
        """
        self.context = context
        self.dumper = dumper
        self.logger = logger

    # ----- Metadata helpers -----

    @classmethod
    def name(cls):
        if cls.plugin_name:
            return cls.plugin_name
        # Convert CamelCaseClass to snake_case for default name
        s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", cls.__name__)
        return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()

    @classmethod
    def get_description(cls):
        return getattr(cls, "description", "")

    @classmethod
    def title(cls):
        return cls.name().capitalize()

    @classmethod
    def get_process_name(cls):
        return cls.process_name or cls.name()

    @classmethod
    def help_text(cls):
        return (f"Usage: rover {cls.name()}\n"
                f"\tExecute a series of {cls.title()} related commands and "
                f"store output in text files")

    # ----- Lifecycle hooks -----

    def setup(self):
        """Optional hook before collect(). Default: no-op."""
        return

    def check_enabled(self):
        """Return True if the module should collect in this context."""
        return self.context.process_detected

    def advise(self):
        """Note a missing credential variable. Never fatal."""
        if not self.token_env:
            return
        if not os.environ.get(self.token_env):
            self.logger.info(f"[{self.name()}] No {self.token_env} value "
                             "detected in this environment")

    def collect(self):
        """Run the fixed command set, then extract system log messages."""
        binary = self.binary or self.name()
        for artifact, args in self.commands:
            self.dump(artifact, binary, *args)
        self.collect_logs()

    def collect_logs(self):
        keyword = self.log_keyword or self.name()
        choice = resolve_log_source(self.context.platform, keyword,
                                    exists=file_exists)
        if choice is None:
            self.logger.info(f"[{self.name()}] No known system log location "
                             f"on {self.context.platform.value}, skipping "
                             "log extraction")
            return
        self.logger.info(f"[{self.name()}] Checking {choice.path} for "
                         f"{self.title()} entries (sudo may be required) ...")
        self.dump(f"{self.name()}_syslog", choice.command, *choice.args)

    # ----- Write helpers -----

    def dump(self, artifact_name, command, *args):
        self.dumper.dump(self.name(), artifact_name, command, *args)
