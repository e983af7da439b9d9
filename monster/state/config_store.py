"""Node config persistence helpers."""
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class NodeConfig(BaseModel):
    """Persisted node settings."""
    node_address: str = ""


class ConfigError(Exception):
    """Config store error exception."""

    def __init__(self, path: Path, message: str = "Config error") -> None:
        self.path = path
        self.message = message
        super().__init__(f"Config Error {path}: {message}")


class ConfigStore:
    """Loads and saves the node config as a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> NodeConfig:
        """Load config; missing or corrupt files yield an empty node address."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return NodeConfig()
        except OSError as e:
            logger.warning(f"Cannot read config {self.path}: {e}")
            return NodeConfig()

        try:
            return NodeConfig.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Ignoring corrupt config {self.path}: {e}")
            return NodeConfig()

    def save(self, config: NodeConfig) -> None:
        """Write config atomically (temp file + rename)."""
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(config.model_dump_json())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise ConfigError(self.path, str(e)) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.info(f"Saved node config to {self.path}")
