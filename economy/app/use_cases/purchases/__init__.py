"""Credit purchase use cases"""
from .list_credit_packages import ListCreditPackages
from .initiate_purchase import InitiatePurchase
from .confirm_purchase import ConfirmPurchase
from .sweep_stale_purchases import SweepStalePurchases
from .dtos import (
    CreditPackageDTO,
    ListCreditPackagesResponseDTO,
    InitiatePurchaseCommandDTO,
    InitiatePurchaseResponseDTO,
    ConfirmPurchaseCommandDTO,
    SweepPurchasesResultDTO,
)

__all__ = [
    "ListCreditPackages",
    "InitiatePurchase",
    "ConfirmPurchase",
    "SweepStalePurchases",
    "CreditPackageDTO",
    "ListCreditPackagesResponseDTO",
    "InitiatePurchaseCommandDTO",
    "InitiatePurchaseResponseDTO",
    "ConfirmPurchaseCommandDTO",
    "SweepPurchasesResultDTO",
]
