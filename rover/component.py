# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

import logging
import signal
import sys

from rover.options import RoverOptions


class RoverComponent():
    """Any rover subcommand (a module collection run, archive) should
    subclass this class to have a consistent set of options, logging and
    exit handling.

    The component's options are built from, in increasing precedence, the
    defaults in `_arg_defaults` and `arg_defaults`, the config file and the
    options given on the command line.
    """

    desc = 'unset'
    help_text = ''

    arg_defaults = {}
    configure_logging = True

    _arg_defaults = {
        "cmd_timeout": 300,
        "config_file": '/etc/rover/rover.conf',
        "debug": False,
        "log_file": 'rover.log',
        "outdir": '.',
        "quiet": False,
        "verbosity": 0,
    }

    # section of the config file read after [global]
    config_section = 'unset'

    def __init__(self, parser, parsed_args, cmdline_args):
        self.parser = parser
        self.args = parsed_args
        self.cmdline = cmdline_args
        self.exit_process = False

        try:
            signal.signal(signal.SIGTERM, self.get_exit_handler())
        except ValueError:
            # not the main thread
            pass

        self._arg_defaults = dict(self._arg_defaults, **self.arg_defaults)
        self.opts = self.load_options()

        if self.configure_logging:
            self._setup_logging()
        else:
            self.roverlog = logging.getLogger('rover')
            self.ui_log = logging.getLogger('rover_ui')

    @classmethod
    def synopsis(cls):
        return cls.desc

    def get_exit_handler(self):
        def exit_handler(signum, frame):
            self.exit_process = True
            self._exit()
        return exit_handler

    def _exit(self, error=0, msg=None):
        if msg:
            self.ui_log.error("")
            self.ui_log.error(msg)
        raise SystemExit(error)

    @classmethod
    def add_parser_options(cls, parser):
        """This should be overridden by each subcommand to add its own unique
        options to the parser
        """
        pass

    def load_options(self):
        """Compile the options for this component: defaults, then the config
        file, then anything given on the command line.
        """
        opts = RoverOptions(arg_defaults=self._arg_defaults)
        config_file = getattr(self.args, 'config_file', None) \
            or opts.config_file
        opts.update_from_conf(config_file, self.config_section)
        opts.merge(self.args)
        return opts

    def _setup_logging(self):
        """Creates the log handlers for the component: a debug log file and
        the console, plus a plain UI log on stdout.
        """
        # main rover logger
        self.roverlog = logging.getLogger('rover')
        self.roverlog.setLevel(logging.DEBUG)
        for handler in list(self.roverlog.handlers):
            self.roverlog.removeHandler(handler)
            handler.close()

        self.rover_log_file = None
        if self.opts.log_file:
            try:
                flog = logging.FileHandler(self.opts.log_file)
            except OSError as e:
                print(f"Unable to open log file {self.opts.log_file}: "
                      f"{e.strerror}")
            else:
                flog.setFormatter(logging.Formatter(
                    '%(asctime)s %(levelname)s: %(message)s'))
                flog.setLevel(logging.DEBUG if self.opts.debug
                              else logging.INFO)
                self.roverlog.addHandler(flog)
                self.rover_log_file = self.opts.log_file

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter('%(message)s'))
        if self.opts.quiet:
            console.setLevel(logging.ERROR)
        elif self.opts.debug or self.opts.verbosity > 1:
            console.setLevel(logging.DEBUG)
        elif self.opts.verbosity > 0:
            console.setLevel(logging.INFO)
        else:
            console.setLevel(logging.WARNING)
        self.roverlog.addHandler(console)

        # ui facing log for the greeting and summary lines
        self.ui_log = logging.getLogger('rover_ui')
        self.ui_log.setLevel(logging.INFO)
        for handler in list(self.ui_log.handlers):
            self.ui_log.removeHandler(handler)
            handler.close()
        ui_console = logging.StreamHandler(sys.stdout)
        ui_console.setFormatter(logging.Formatter('%(message)s'))
        ui_console.setLevel(logging.ERROR if self.opts.quiet
                            else logging.INFO)
        self.ui_log.addHandler(ui_console)

        self.roverlog.debug(f"options: {self.opts!r}")

    def execute(self):
        raise NotImplementedError

# vim: set et ts=4 sw=4 :
