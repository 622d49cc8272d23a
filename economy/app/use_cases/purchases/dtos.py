"""Data Transfer Objects for Credit Purchase Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from economy.domain.pricing import CreditPackage


class CreditPackageDTO(BaseModel):
    code: str = Field(..., description="Package code")
    label: str = Field(..., description="Display label")
    credits: int = Field(..., description="Base credits")
    bonus: int = Field(..., description="Bonus credits")
    total_credits: int = Field(..., description="Credits granted on confirmation")
    price: Decimal = Field(..., description="Price in major currency units")
    price_cents: int = Field(..., description="Price in minor currency units")

    @classmethod
    def from_package(cls, package: CreditPackage) -> "CreditPackageDTO":
        return cls(
            code=package.code,
            label=package.label,
            credits=package.credits,
            bonus=package.bonus,
            total_credits=package.total_credits,
            price=package.price,
            price_cents=package.price_cents,
        )


class ListCreditPackagesResponseDTO(BaseModel):
    packages: List[CreditPackageDTO]
    currency: str


class InitiatePurchaseCommandDTO(BaseModel):
    """
    Command DTO for starting a credit purchase

    The package is named either by package_code or by its exact
    (amount, bonus, price) triple.
    """

    user_id: str = Field(
        ...,
        description="Purchasing user"
    )

    package_code: Optional[str] = Field(
        default=None,
        description="Credit package code (STARTER, PRO, BUSINESS)"
    )

    amount: Optional[int] = Field(
        default=None,
        gt=0,
        description="Base credits of the package"
    )

    bonus: Optional[int] = Field(
        default=None,
        ge=0,
        description="Bonus credits of the package"
    )

    price: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Package price in major currency units"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_123",
                "package_code": "PRO"
            }
        }


class InitiatePurchaseResponseDTO(BaseModel):
    purchase_id: str = Field(..., description="Pending purchase ID")
    payment_intent_id: str = Field(..., description="Payment intent reference")
    client_secret: Optional[str] = Field(None, description="Secret for completing payment client-side")
    package_code: str
    credits: int = Field(..., description="Credits granted on confirmation (base + bonus)")
    price_cents: int
    currency: str
    created_at: datetime


class ConfirmPurchaseCommandDTO(BaseModel):
    """
    Command DTO for confirming a purchase

    user_id is None for trusted callers (payment webhook, sweeper).
    """

    payment_intent_id: str = Field(..., min_length=1, description="Payment intent reference")
    user_id: Optional[str] = Field(None, description="Caller; must own the purchase when given")

    class Config:
        json_schema_extra = {
            "example": {
                "payment_intent_id": "pi_3NxYz",
                "user_id": "user_123"
            }
        }


class SweepPurchasesResultDTO(BaseModel):
    """Outcome of a stale purchase sweep"""

    checked: int = Field(..., description="Stale purchases examined")
    confirmed: int = Field(..., description="Purchases credited")
    failed: int = Field(..., description="Purchases closed as FAILED")
    skipped: int = Field(..., description="Purchases left for a later run")
    run_at: datetime
