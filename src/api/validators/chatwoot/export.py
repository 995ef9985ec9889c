"""Validação das requisições de exportação em lote."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from api.validators.chatwoot.base import validate_model

MAX_BULK_EXPORT_CONTACTS = 100

ExportFormat = Literal["json", "xml", "csv", "zip"]
ContactId = Annotated[int, Field(ge=1)]


class BulkExportRequest(BaseModel):
    """Pedido de exportação de dados de até 100 contatos."""

    model_config = ConfigDict(extra="ignore")

    contact_ids: list[ContactId] = Field(..., min_length=1, max_length=MAX_BULK_EXPORT_CONTACTS)
    format: ExportFormat = "json"
    include_conversations: bool = False
    include_consents: bool = False
    include_activities: bool = False


class ExportReference(BaseModel):
    """Exportação alvo vinda do path (`/export/.../{export_id}`)."""

    model_config = ConfigDict(extra="ignore")

    export_id: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")


def validate_bulk_export(data: Any) -> dict[str, Any]:
    return validate_model(BulkExportRequest, data)


def validate_export_reference(data: Any) -> dict[str, Any]:
    return validate_model(ExportReference, data)
