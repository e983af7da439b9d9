"""Pydantic schemas for queries and reports."""
import json
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..providers.errors import ValidationError
from ..providers.rpc_client import ZERO_ADDRESS, normalize_address


def parse_params(text: Optional[str]) -> Optional[list[Any]]:
    """
    Parse --params JSON text into a positional parameter list.

    None means "not given"; blank text means no parameters.
    """
    if text is None:
        return None

    if not text.strip():
        return []

    try:
        value = json.loads(text)
    except ValueError as e:
        raise ValidationError(f"Params must be JSON: {e}") from e

    if isinstance(value, list):
        return value
    return [value]


# Queries
class QueryArgs(BaseModel):
    """Arguments for one query invocation."""
    model_config = ConfigDict(frozen=True)

    address: str = ZERO_ADDRESS
    from_block: int = Field(0, ge=0)
    to_block: int = Field(1000, ge=0)
    method: str = Field("logs", min_length=1)
    nodes: tuple[str, ...] = ()
    timeout: int = Field(1000, gt=0)
    params: Optional[str] = None

    @property
    def filter_address(self) -> Optional[str]:
        """Address to filter on, None for the zero address."""
        return normalize_address(self.address)

    @field_validator("address")
    @classmethod
    def check_address(cls, value: str) -> str:
        normalize_address(value)
        return value

    @field_validator("params")
    @classmethod
    def check_params(cls, value: Optional[str]) -> Optional[str]:
        parse_params(value)
        return value

    @model_validator(mode="after")
    def check_range(self) -> "QueryArgs":
        if self.to_block < self.from_block:
            raise ValueError(
                f"to_block ({self.to_block}) is below from_block ({self.from_block})"
            )
        return self


# Reports
class ReportHeader(BaseModel):
    """What was queried, and where."""
    model_config = ConfigDict(frozen=True)

    node: str
    args: QueryArgs


class ReportRecord(BaseModel):
    """Outcome of one query against one node."""
    model_config = ConfigDict(frozen=True)

    success: bool
    error: Optional[str] = None
    duration_ms: int
    result: Optional[str] = None
    target: Optional[str] = None
    status: Optional[str] = None
