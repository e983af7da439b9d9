"""Monster CLI entry point."""
import argparse
import asyncio
import logging
import sys
from typing import Optional

import pydantic

from .config import Settings
from .models.schemas import QueryArgs
from .pipelines.query_runner import NodeNotInitializedError, QueryRunner
from .state.config_store import ConfigError, ConfigStore, NodeConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ABORTED = 2


def add_query_flags(parser: argparse.ArgumentParser, suppress_defaults: bool = False) -> None:
    """Register the query flags; suppressed defaults keep values given before a subcommand."""

    def default(value):
        return argparse.SUPPRESS if suppress_defaults else value

    parser.add_argument("-a", "--address", default=default("0x0"), help="Address to query")
    parser.add_argument(
        "-f", "--from", dest="from_block", type=int, default=default(0), help="Start block"
    )
    parser.add_argument(
        "-t", "--to", dest="to_block", type=int, default=default(1000), help="End block"
    )
    parser.add_argument("-m", "--method", default=default("logs"), help="Method to run")
    parser.add_argument(
        "-n",
        "--node",
        dest="nodes",
        action="append",
        default=default(None),
        help="Node to connect to (repeat to query several nodes)",
    )
    parser.add_argument(
        "-T", "--timeout", type=int, default=default(None), help="Timeout for the request in ms"
    )
    parser.add_argument(
        "-p", "--params", default=default(None), help="JSON params for non-logs methods"
    )
    parser.add_argument(
        "--json", action="store_true", default=default(False), help="Print the report as JSON"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="monster",
        description="monster - a simple CLI to test Ethereum-compatible nodes",
    )
    add_query_flags(parser)

    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Save the node to query")
    init_parser.add_argument("-n", "--node", dest="node", required=True, help="Node URL")

    subparsers.add_parser("show", help="Show the saved node")

    query_parser = subparsers.add_parser("query", help="Run a query (default)")
    add_query_flags(query_parser, suppress_defaults=True)

    return parser


def initialise_cli(store: ConfigStore, node: str) -> int:
    """Persist the node address."""
    try:
        store.save(NodeConfig(node_address=node))
    except ConfigError as e:
        logger.error(f"Failed to save config: {e}")
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ABORTED

    print(f"Node set to {node}")
    return EXIT_OK


def show_config(store: ConfigStore) -> int:
    node = store.load().node_address
    if node:
        print(node)
    else:
        print("Node address not initialized. Use 'init' command to set the node.")
    return EXIT_OK


async def run_query(
    settings: Settings, node_config: NodeConfig, args: argparse.Namespace
) -> int:
    """Build query args, run the query, display the report."""
    try:
        query = QueryArgs(
            address=args.address,
            from_block=args.from_block,
            to_block=args.to_block,
            method=args.method,
            nodes=tuple(args.nodes or ()),
            timeout=args.timeout if args.timeout is not None else settings.rpc_timeout_default,
            params=args.params,
        )
    except pydantic.ValidationError as e:
        logger.error(f"Invalid arguments: {e}")
        for err in e.errors():
            print(f"Error: {err['msg']}", file=sys.stderr)
        return EXIT_ABORTED

    runner = QueryRunner(settings, node_config)

    try:
        report = await runner.run(query)
    except NodeNotInitializedError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ABORTED

    report.display(as_json=args.json)
    return EXIT_OK if report.succeeded else EXIT_FAILED


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments and dispatch the command."""
    args = build_parser().parse_args(argv)
    settings = Settings()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    store = ConfigStore(settings.config_path)

    if args.command == "init":
        return initialise_cli(store, args.node)

    if args.command == "show":
        return show_config(store)

    return asyncio.run(run_query(settings, store.load(), args))


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    run()
