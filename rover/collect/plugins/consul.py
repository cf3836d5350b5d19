# This file is part of the rover project
#
# Consul module: https://www.consul.io/

from rover.collect.plugin import CollectPluginBase


class ConsulPlugin(CollectPluginBase):
    plugin_name = "consul"
    description = "Execute Consul related commands and store output"
    token_env = "CONSUL_HTTP_TOKEN"

    commands = (
        ("consul_version", ("version",)),
        ("consul_members", ("members",)),
        ("consul_info", ("info",)),
    )
