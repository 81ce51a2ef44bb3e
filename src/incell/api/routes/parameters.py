"""API routes for spreadsheet import/export."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from incell.api.deps import get_bridge
from incell.bridge import Bridge
from incell.parameters.template import EXPORT_TEMPLATE
from incell.parameters.workbook import ParameterValue

router = APIRouter(prefix="/api/parameters", tags=["parameters"])


class ImportRequest(BaseModel):
    file_path: str | None = None


class ExportRequest(BaseModel):
    parameters: dict[str, ParameterValue] = Field(default_factory=dict)
    model_name: str | None = None
    file_path: str | None = None


class TemplateEntry(BaseModel):
    category: str
    name: str
    value_range: str


@router.post("/import")
async def import_parameters(
    req: ImportRequest | None = None, bridge: Bridge = Depends(get_bridge)
) -> dict:
    """Read a parameter set from a workbook (file dialog when no path is given)."""
    file_path = req.file_path if req is not None else None
    return (await bridge.import_parameters(file_path)).to_wire()


@router.post("/export")
async def export_parameters(req: ExportRequest, bridge: Bridge = Depends(get_bridge)) -> dict:
    """Write a parameter set to a workbook (file dialog when no path is given)."""
    outcome = await bridge.export_parameters(req.parameters, req.model_name, req.file_path)
    return outcome.to_wire()


@router.get("/template")
async def get_template() -> list[TemplateEntry]:
    """The fixed export layout."""
    return [TemplateEntry(**row._asdict()) for row in EXPORT_TEMPLATE]
