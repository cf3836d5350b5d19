# This file is part of the rover project
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# version 2 of the GNU General Public License.
#
# See the LICENSE file in the source distribution for further information.

from configparser import ConfigParser, ParsingError, Error


def _is_seq(val):
    """Return true if val is an instance of a known sequence type."""
    val_type = type(val)
    return val_type is list or val_type is tuple


def str_to_bool(val):
    _val = val.lower()
    if _val in ['true', 'on', 'yes', '1']:
        return True
    if _val in ['false', 'off', 'no', '0']:
        return False
    return None


class RoverOptions():

    def __str(self, quote=False, sep=" ", prefix="", suffix=""):
        """Format a RoverOptions object as a human or machine readable string.

            :param quote: quote option values
            :param sep: list separator string
            :param prefix: arbitrary prefix string
            :param suffix: arbitrary suffix string
        """
        args = prefix
        arg_fmt = "=%s"
        for arg in self.arg_names:
            args += arg + arg_fmt + sep

        vals = [getattr(self, arg) for arg in self.arg_names]
        if not quote:
            # Convert Python source notation for sequences into plain strings
            vals = [",".join(v) if _is_seq(v) else v for v in vals]
        else:
            vals = [f"'{v}'" if isinstance(v, str) else v for v in vals]

        return (args % tuple(vals)).strip(sep) + suffix

    def __str__(self):
        return self.__str()

    def __repr__(self):
        return self.__str(quote=True, sep=", ", prefix="(", suffix=")")

    def __init__(self, arg_defaults=None, **kwargs):
        """Initialise a new ``RoverOptions`` object from keyword arguments.

            Initialises a new object with values taken from keyword
            arguments matching the names in ``arg_defaults``.

            If ``kwargs`` contains a value for an argument name that is
            not in ``arg_defaults`` a ``ValueError`` is raised.

            :param arg_defaults: a dict of option names and default values
            :param kwargs: a list of argument name, value pairs
            :returntype: ``RoverOptions``
        """
        self._arg_defaults = arg_defaults or {}
        self.arg_names = list(self._arg_defaults.keys())
        self._nondefault = set()
        # first load the defaults
        for arg in self._arg_defaults:
            setattr(self, arg, self._arg_defaults[arg])
        # next, load any kwargs
        for arg in kwargs.keys():
            if arg not in self.arg_names:
                raise ValueError(f"Unknown option: {arg}")
            setattr(self, arg, kwargs[arg])
            self._nondefault.add(arg)

    def _convert_to_type(self, key, val, conf):
        """Ensure that the value read from a config file is the proper type
        for consumption by the component, as defined by arg_defaults.

        Params:
            :param key:         The key in arg_defaults we need to match the
                                type of
            :param val:         The value to be converted to a particular type
            :param conf:        File values are being loaded from
        """
        default = self._arg_defaults[key]
        if isinstance(default, bool):
            conv = str_to_bool(val)
            if conv is None:
                raise ValueError(
                    f"Invalid value for '{key}' in '{conf}': must be a "
                    "boolean (true/false)"
                )
            return conv
        if isinstance(default, int):
            try:
                return int(val)
            except ValueError:
                raise ValueError(f"Invalid value for '{key}' in '{conf}': "
                                 "must be an integer")
        if isinstance(default, list):
            return [v.strip() for v in val.split(',') if v.strip()]
        return val

    def update_from_conf(self, config_file, component):
        """Read the provided config_file and update options from that.

        Sections are read in order: ``[global]`` first, then the section
        named after the component, so component settings win. Options
        already set explicitly are left untouched.

            :param config_file:     Filepath to the config file
            :param component:       Which component (section) to load
        """

        def _update_from_section(section, config):
            if not config.has_section(section):
                return
            for key, val in config.items(section):
                # the config file may use dashes like the command line
                key = key.replace('-', '_')
                if key not in self.arg_names:
                    print(f"Unknown option '{key}' in section '{section}'")
                    continue
                if key in self._nondefault:
                    continue
                try:
                    setattr(self, key,
                            self._convert_to_type(key, val, config_file))
                except ValueError as err:
                    print(err)

        config = ConfigParser()
        try:
            with open(config_file, encoding='utf-8') as f:
                config.read_file(f, config_file)
        except FileNotFoundError:
            return
        except OSError as err:
            print(f"Unable to read {config_file}: {err.strerror}")
            return
        except (ParsingError, Error) as err:
            print(f"Failed to parse configuration file {config_file}: {err}")
            return

        for section in ('global', component):
            _update_from_section(section, config)

    def merge(self, src):
        """Merge values set in ``src`` into this object.

            ``src`` is any object carrying option attributes, typically an
            argparse ``Namespace``. Attributes that are missing or ``None``
            in ``src`` were not given and do not override current values.

            :param src: the object to copy from
        """
        for arg in self.arg_names:
            value = getattr(src, arg, None)
            if value is None:
                continue
            setattr(self, arg, value)
            self._nondefault.add(arg)

    def dict(self):
        """Return this ``RoverOptions`` option values as a dictionary of
            argument name to value mappings.

            :returns: a name:value dictionary of option values.
        """
        return {arg: getattr(self, arg) for arg in self.arg_names}

# vim: set et ts=4 sw=4 :
