from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MatchStrategy(str, Enum):
    BASENAME = "basename"
    PATH = "path"


class FlowPosition(BaseModel):
    offset: int


class FlowLocation(BaseModel):
    start: FlowPosition
    end: FlowPosition


class FlowMessage(BaseModel):
    descr: str = ""
    path: str | None = None
    loc: FlowLocation | None = None


class FlowError(BaseModel):
    message: list[FlowMessage]


class FlowReport(BaseModel):
    # entries are validated one by one by the loader
    errors: list[Any]


class ArityErrorRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_path: str
    start_offset: int
    end_offset: int
    required_arity: int = Field(ge=0)


class TransformOptions(BaseModel):
    errors: str | None = None
    match: MatchStrategy = MatchStrategy.BASENAME
    placeholder: str = "any"
    language: str | None = None
    generated_marker: str = "@generated"
    opt_in_marker: str = "@flow"
    declaration_suffixes: tuple[str, ...] = (".js.flow",)
