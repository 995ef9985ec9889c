"""Validação das requisições LGPD (consentimento e titular de dados)."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress

from api.validators.chatwoot.base import validate_model

ConsentType = Literal["data_processing", "marketing", "health_data"]


class ConsentRequest(BaseModel):
    """Registro de consentimento de um contato."""

    model_config = ConfigDict(extra="ignore")

    contact_id: int = Field(..., ge=1)
    consent_type: ConsentType
    consent_granted: bool
    ip_address: IPvAnyAddress | None = None
    user_agent: str | None = Field(None, max_length=500)


class ContactReference(BaseModel):
    """Contato alvo vindo do path (`/lgpd/.../{contact_id}`)."""

    model_config = ConfigDict(extra="ignore")

    contact_id: int = Field(..., ge=1)


class LeadReference(BaseModel):
    """Lead alvo vindo do path (`/.../{lead_id}`)."""

    model_config = ConfigDict(extra="ignore")

    lead_id: int = Field(..., ge=1)


def validate_consent(data: Any) -> dict[str, Any]:
    return validate_model(ConsentRequest, data)


def validate_contact_reference(data: Any) -> dict[str, Any]:
    return validate_model(ContactReference, data)


def validate_lead_reference(data: Any) -> dict[str, Any]:
    return validate_model(LeadReference, data)
