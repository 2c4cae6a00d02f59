"""
CLI commands for chainplan.
"""

from chainplan.cli.deploy import deploy_command
from chainplan.cli.status import accounts_command, networks_command, status_command
from chainplan.cli.tickets import set_tickets_command

__all__ = [
    "deploy_command",
    "set_tickets_command",
    "status_command",
    "accounts_command",
    "networks_command",
]
