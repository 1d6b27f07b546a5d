from typing import Any

from pydantic import BaseModel, Field


class ExportDocument(BaseModel):
    """Backup document. Records are passed through as stored."""
    baby: list[Any] = Field(default_factory=list)
    feedings: list[Any] = Field(default_factory=list)
    diapers: list[Any] = Field(default_factory=list)
    sleeps: list[Any] = Field(default_factory=list)
    growth: list[Any] = Field(default_factory=list)
    medications: list[Any] = Field(default_factory=list)


class ImportResponse(BaseModel):
    ok: bool = True
    imported: list[str] = Field(default_factory=list, description="Collections that were replaced.")
