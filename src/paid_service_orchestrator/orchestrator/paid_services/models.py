"""Pydantic models exchanged with paid-service collaborators."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ServiceSummary(BaseModel):
    name: str
    description: str = ""


class ServiceField(BaseModel):
    name: str
    description: str = ""
    type: str = "string"


class ServiceSchema(BaseModel):
    id: str
    description: str = ""
    fields: list[ServiceField] = Field(default_factory=list)


QuestionType = Literal["list", "confirm", "input"]


class Question(BaseModel):
    """A single interactive question, answered under `name`."""

    type: QuestionType
    name: str
    message: str
    choices: list[str] = Field(default_factory=list)
    prefix: str | None = None
    default: Any = None


class DecodedPaymentRequest(BaseModel):
    amount: int = Field(ge=0, description="Amount requested, in base units")
    destination: str | None = None
    description: str | None = None


class PaymentResult(BaseModel):
    amount: int = Field(ge=0, description="Amount paid excluding fees, in base units")
    fee: int = Field(default=0, ge=0)
