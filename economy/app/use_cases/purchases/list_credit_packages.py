"""List Credit Packages Use Case"""

from economy.libs.result import Result, Return
from economy.domain.pricing import CREDIT_PACKAGES
from .dtos import CreditPackageDTO, ListCreditPackagesResponseDTO


class ListCreditPackages:

    def __init__(self, currency: str = "usd"):
        self.currency = currency

    async def execute(self) -> Result[ListCreditPackagesResponseDTO]:
        return Return.ok(
            ListCreditPackagesResponseDTO(
                packages=[CreditPackageDTO.from_package(p) for p in CREDIT_PACKAGES],
                currency=self.currency,
            )
        )
