# This file is part of the rover project
#
# Namespace for rover collection modules.
#
# Each module file defines exactly one CollectPluginBase subclass and is
# exposed as a `rover <name>` subcommand. Modules starting with an
# underscore are not discovered.
