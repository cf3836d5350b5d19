# This file is part of the rover project
#
# Nomad module: https://nomadproject.io/

from rover.collect.plugin import CollectPluginBase


class NomadPlugin(CollectPluginBase):
    plugin_name = "nomad"
    description = "Execute Nomad related commands and store output"
    token_env = "NOMAD_TOKEN"

    commands = (
        ("nomad_status", ("status",)),
        ("nomad_version", ("version",)),
    )
