"""Cashtag confirmation model."""

from pydantic import BaseModel, Field


class CashtagResult(BaseModel):
    """Confirmation link for a payment cashtag. Nothing is verified."""

    cashtag: str
    name: str
    avatar: str | None = None
    confirm_url: str = Field(serialization_alias="confirmUrl")
