"""Monster configuration management."""
from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MONSTER_", env_file=".env", extra="ignore"
    )

    # Node override (sits between the --node flag and the saved config)
    node: Optional[str] = None

    # Persisted node config
    config_path: Path = Path.home() / ".monster" / "config.json"

    # Timeouts (milliseconds)
    rpc_timeout_default: int = 1000

    # Logging
    log_level: str = "INFO"


def resolve_node(
    cli_nodes: tuple[str, ...],
    settings: Settings,
    saved_node: str,
) -> list[str]:
    """
    Resolve the node URLs to query.

    Precedence: --node flags, then MONSTER_NODE, then the saved config.
    Returns an empty list when nothing is configured.
    """
    nodes = [node for node in cli_nodes if node]
    if nodes:
        return nodes

    if settings.node:
        return [settings.node]

    if saved_node:
        return [saved_node]

    return []
