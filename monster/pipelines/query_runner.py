"""Query pipeline: resolve node, dispatch one RPC call, build the report."""
import asyncio
import json
import logging
import time
from enum import Enum
from typing import Any, Callable

from ..config import Settings, resolve_node
from ..decoders.error_decoder import describe_revert
from ..models.schemas import QueryArgs, ReportHeader, ReportRecord, parse_params
from ..providers.errors import RemoteRPCError, RPCError
from ..providers.rpc_client import RPCClient, build_log_filter
from ..providers.scoring import calculate_score, score_to_status
from ..report import Report
from ..state.config_store import NodeConfig

logger = logging.getLogger(__name__)

NOT_INITIALIZED_MESSAGE = (
    "Node address not initialized. Use 'init' command to set the node."
)


class QueryState(str, Enum):
    """Lifecycle of one invocation."""
    UNINITIALIZED = "uninitialized"
    NODE_RESOLVED = "node_resolved"
    TRANSPORT_READY = "transport_ready"
    DISPATCHED = "dispatched"
    REPORTED = "reported"
    ABORTED = "aborted"


class NodeNotInitializedError(Exception):
    """No node URL from flags, environment or saved config."""

    def __init__(self, message: str = NOT_INITIALIZED_MESSAGE) -> None:
        self.message = message
        super().__init__(message)


def describe_error(error: RPCError) -> str:
    """Render an RPC failure for the report."""
    if isinstance(error, RemoteRPCError):
        text = f"RPC Error {error.code}: {error.message}"
        reason = describe_revert(error.data)
        if reason:
            text = f"{text} (revert: {reason})"
        return text

    return str(error) or f"{type(error).__name__} {error.code}"


class QueryRunner:
    """Runs one query against each resolved node and reports the outcome."""

    def __init__(
        self,
        settings: Settings,
        node_config: NodeConfig,
        client_factory: Callable[[str, int], RPCClient] = RPCClient.for_url,
    ) -> None:
        self.settings = settings
        self.node_config = node_config
        self.client_factory = client_factory
        self.state = QueryState.UNINITIALIZED

    def resolve_targets(self, args: QueryArgs) -> list[str]:
        """Pick the node URLs, aborting when none is configured."""
        targets = resolve_node(args.nodes, self.settings, self.node_config.node_address)

        if not targets:
            self.state = QueryState.ABORTED
            logger.error(NOT_INITIALIZED_MESSAGE)
            raise NodeNotInitializedError()

        self.state = QueryState.NODE_RESOLVED
        return targets

    async def run(self, args: QueryArgs) -> Report:
        """Resolve, dispatch and collect one record per target."""
        targets = self.resolve_targets(args)

        clients = [self.client_factory(url, args.timeout) for url in targets]
        self.state = QueryState.TRANSPORT_READY

        logger.info(f"Querying {len(clients)} node(s) with method={args.method}")
        self.state = QueryState.DISPATCHED

        # Each target fails independently
        results = await asyncio.gather(
            *[self.query_target(client, args) for client in clients],
            return_exceptions=True,
        )

        report = Report(ReportHeader(node=", ".join(targets), args=args))
        for url, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.error(f"Query failed for {url}: {result}")
                result = ReportRecord(
                    success=False,
                    error=f"{type(result).__name__}: {result}",
                    duration_ms=0,
                    target=url,
                    status=score_to_status(calculate_score(None, False)),
                )
            elif isinstance(result, BaseException):
                raise result
            report.add_data(result)

        self.state = QueryState.REPORTED
        return report

    async def query_target(self, client: RPCClient, args: QueryArgs) -> ReportRecord:
        """Dispatch the query to one node and capture the outcome."""
        start_time = time.perf_counter()
        result: str | None = None
        error: str | None = None

        try:
            if args.method == "logs":
                logs = await client.get_logs(
                    args.from_block, args.to_block, args.filter_address
                )
                result = f"{len(logs)} logs"
            else:
                value = await client.call(args.method, self.generic_params(args))
                result = json.dumps(value)

        except RPCError as e:
            error = describe_error(e)
            logger.warning(f"{client.url}: {error}")

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        success = error is None
        score = calculate_score(duration_ms if success else None, success)

        if success:
            logger.info(f"{client.url}: {result} in {duration_ms}ms")

        return ReportRecord(
            success=success,
            error=error,
            duration_ms=duration_ms,
            result=result,
            target=client.url,
            status=score_to_status(score),
        )

    @staticmethod
    def generic_params(args: QueryArgs) -> list[Any]:
        """Positional params for a non-logs method."""
        params = parse_params(args.params)
        if params is not None:
            return params

        return [build_log_filter(args.from_block, args.to_block, args.filter_address)]
