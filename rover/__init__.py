# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

"""
This module houses the i18n setup and message function. The default is to
use gettext to internationalize messages.
"""
__version__ = "0.3.0"

import gettext
import sys

from argparse import ArgumentParser, RawDescriptionHelpFormatter

gettext_dir = "/usr/share/locale"
gettext_app = "rover"
gettext.bindtextdomain(gettext_app, gettext_dir)


def _default(msg):
    return gettext.dgettext(gettext_app, msg)


_rover = _default


class Rover():
    """Main entrypoint for rover from the command line

    Upon initialization, this class loads the collection modules and the
    archive component, builds a subcommand for each of them and dispatches
    to the one requested. Each collection module is its own subcommand,
    e.g. 'rover nomad', and they all share the common options.
    """

    def __init__(self, args):
        self.cmdline = args
        # define the local subcommands that rover supports; collection
        # modules are added below as they are discovered
        import rover.archive
        import rover.collect
        self._components = {
            'archive': rover.archive.RoverArchive,
        }
        self._plugins = {}
        for plugin in rover.collect.discover_plugins():
            self._plugins[plugin.name()] = plugin
            self._components[plugin.name()] = rover.collect.RoverCollect

        # build the top-level parser
        _com_string = ''
        for comp in self._components:
            _com_string += f"\t{comp:<12}{self._synopsis(comp)}\n"
        usage_string = ("%(prog)s <component> [options]\n\n"
                        "Available components:\n")
        usage_string = usage_string + _com_string
        epilog = ("See `rover <component> --help` for more information")
        self.parser = ArgumentParser(usage=usage_string, epilog=epilog)
        self.parser.add_argument('--version', action='version',
                                 version=f'%(prog)s {__version__}')

        # set up subparsers for each component
        self.subparsers = self.parser.add_subparsers(
            dest='component',
            metavar='component',
            help='rover component to run'
        )
        self.subparsers.required = True

        for comp in self._components:
            _com_subparser = self.subparsers.add_parser(
                comp,
                help=self._synopsis(comp),
                description=self._help_text(comp),
                formatter_class=RawDescriptionHelpFormatter,
                prog=f"rover {comp}",
            )
            self._add_common_options(_com_subparser)
            self._components[comp].add_parser_options(parser=_com_subparser)
            _com_subparser.set_defaults(component=comp)
        self.args = self.parser.parse_args(self.cmdline)
        self._init_component()

    def _synopsis(self, comp):
        if comp in self._plugins:
            return self._plugins[comp].get_description()
        return self._components[comp].synopsis()

    def _help_text(self, comp):
        if comp in self._plugins:
            return self._plugins[comp].help_text()
        return self._components[comp].help_text.strip()

    def _add_common_options(self, parser):
        """Adds the options shared by all components. Defaults live in
        RoverComponent._arg_defaults so unset options stay None here and
        config file values are not overridden.
        """
        global_grp = parser.add_argument_group(
            'Global Options',
            'These options may be used with any rover component'
        )
        global_grp.add_argument("--cmd-timeout", dest="cmd_timeout",
                                type=int, default=None,
                                help="timeout in seconds for each collected "
                                     "command, 0 disables (default 300)")
        global_grp.add_argument("--config-file", dest="config_file",
                                default=None,
                                help="specify alternate configuration file")
        global_grp.add_argument("--debug", action="store_true",
                                dest="debug", default=None,
                                help="enable debug logging on the console "
                                     "and raise unexpected errors")
        global_grp.add_argument("--log-file", dest="log_file", default=None,
                                help="write the debug log to this file, "
                                     "an empty value disables it "
                                     "(default rover.log)")
        global_grp.add_argument("--outdir", dest="outdir", default=None,
                                help="directory holding the <hostname> "
                                     "output tree (default .)")
        global_grp.add_argument("-q", "--quiet", action="store_true",
                                dest="quiet", default=None,
                                help="only print fatal errors")
        global_grp.add_argument("-v", "--verbose", action="count",
                                dest="verbosity", default=None,
                                help="increase verbosity")

    def _init_component(self):
        """Based on the provided subcommand, initialize the relevant
        component. For collection modules the plugin class is passed along.
        """
        _com = self.args.component
        if _com not in self._components.keys():
            print(f"Unknown subcommand '{_com}' specified")
            sys.exit(1)
        try:
            if _com in self._plugins:
                self._component = self._components[_com](
                    self.parser, self.args, self.cmdline,
                    self._plugins[_com]
                )
            else:
                self._component = self._components[_com](
                    self.parser, self.args, self.cmdline
                )
        except Exception as err:
            print(f"Could not initialize '{_com}': {err}")
            sys.exit(1)

    def execute(self):
        return self._component.execute()


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    sys.exit(Rover(args).execute())

# vim: set et ts=4 sw=4 :
