"""
chainplan CLI

Usage:
    chainplan <command> [args]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from chainplan.config.settings import get_settings
from chainplan.logging import configure_logging


def _add_network_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--network", "-n", required=True, help="Target network name (e.g. rinkeby, fuji)")
    parser.add_argument("--config", dest="config_path", help="Path to networks.yaml")
    parser.add_argument("--rpc-url", help="Override the network's RPC endpoint")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chainplan",
        description="Idempotent contract deployment and linkage reconciliation",
    )
    parser.add_argument("--log-level", help="Log level (default from CHAINPLAN_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command")

    deploy_parser = subparsers.add_parser("deploy", help="Deploy the prize pool plan")
    _add_network_args(deploy_parser)
    deploy_parser.add_argument("--deployments-dir", help="Registry directory (default: deployments)")
    deploy_parser.add_argument("--artifacts-dir", help="Compiled artifacts directory (default: artifacts)")

    tickets_parser = subparsers.add_parser(
        "set-tickets", help="Point the prize pool at a yes/no ticket pair"
    )
    _add_network_args(tickets_parser)
    tickets_parser.add_argument("--yes", dest="yes_address", help="Yes ticket address")
    tickets_parser.add_argument("--no", dest="no_address", help="No ticket address")
    tickets_parser.add_argument("--pool", dest="pool_address", help="Prize pool address")
    tickets_parser.add_argument("--deployments-dir", help="Registry directory (default: deployments)")
    tickets_parser.add_argument("--artifacts-dir", help="Compiled artifacts directory (default: artifacts)")

    status_parser = subparsers.add_parser("status", help="Show recorded deployments for a network")
    status_parser.add_argument("--network", "-n", required=True, help="Target network name")
    status_parser.add_argument("--config", dest="config_path", help="Path to networks.yaml")
    status_parser.add_argument("--deployments-dir", help="Registry directory (default: deployments)")

    accounts_parser = subparsers.add_parser("accounts", help="Print the list of accounts")
    _add_network_args(accounts_parser)

    networks_parser = subparsers.add_parser("networks", help="List configured networks")
    networks_parser.add_argument("--config", dest="config_path", help="Path to networks.yaml")

    return parser


def run(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    level = (args.log_level or settings.log_level).upper()
    configure_logging(getattr(logging, level, logging.INFO), json_output=settings.log_json)

    if args.command == "deploy":
        from chainplan.cli.deploy import deploy_command

        return deploy_command(
            args.network,
            config_path=args.config_path,
            deployments_dir=args.deployments_dir,
            artifacts_dir=args.artifacts_dir,
            rpc_url=args.rpc_url,
        )

    if args.command == "set-tickets":
        from chainplan.cli.tickets import set_tickets_command

        return set_tickets_command(
            args.network,
            yes_address=args.yes_address,
            no_address=args.no_address,
            pool_address=args.pool_address,
            config_path=args.config_path,
            deployments_dir=args.deployments_dir,
            artifacts_dir=args.artifacts_dir,
            rpc_url=args.rpc_url,
        )

    if args.command == "status":
        from chainplan.cli.status import status_command

        return status_command(
            args.network, config_path=args.config_path, deployments_dir=args.deployments_dir
        )

    if args.command == "accounts":
        from chainplan.cli.status import accounts_command

        return accounts_command(args.network, config_path=args.config_path, rpc_url=args.rpc_url)

    if args.command == "networks":
        from chainplan.cli.status import networks_command

        return networks_command(config_path=args.config_path)

    parser.print_help()
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    sys.exit(run(argv))


if __name__ == "__main__":
    main()
