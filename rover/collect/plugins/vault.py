# This file is part of the rover project
#
# Vault module: https://www.vaultproject.io/

from rover.collect.plugin import CollectPluginBase


class VaultPlugin(CollectPluginBase):
    plugin_name = "vault"
    description = "Execute Vault related commands and store output"
    token_env = "VAULT_TOKEN"

    commands = (
        ("vault_status", ("status",)),
        ("vault_version", ("version",)),
    )
