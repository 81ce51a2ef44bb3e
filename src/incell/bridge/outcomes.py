"""Flat result envelopes returned by every bridge operation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from incell.device.models import PortInfo
from incell.exceptions import error_message
from incell.parameters.workbook import ParameterValue


class Outcome(BaseModel):
    """Success flag plus an error message on failure."""

    success: bool = True
    error: str | None = None

    @classmethod
    def failed(cls, exc: BaseException) -> Outcome:
        return Outcome(success=False, error=error_message(exc))

    def to_wire(self) -> dict:
        return self.model_dump(exclude_none=True)


class PortsOutcome(Outcome):
    ports: list[PortInfo] = Field(default_factory=list)


class ImportOutcome(Outcome):
    parameters: dict[str, ParameterValue] = Field(default_factory=dict)
    file_path: str


class ExportOutcome(Outcome):
    file_path: str


class Canceled(BaseModel):
    """The operator dismissed a file dialog."""

    canceled: Literal[True] = True

    def to_wire(self) -> dict:
        return self.model_dump()
