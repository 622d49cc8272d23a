"""InitiatePurchase Use Case

Creates a payment intent for a catalog credit package and records the
pending purchase.
"""

import logging
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.payment_gateway import PaymentGateway, PaymentGatewayError
from economy.app.repositories.pending_purchase_repository import PendingPurchaseRepository
from economy.domain.pending_purchase import PendingPurchase, PurchaseStatus
from economy.domain.pricing import find_credit_package
from .dtos import InitiatePurchaseCommandDTO, InitiatePurchaseResponseDTO

logger = logging.getLogger(__name__)


class InitiatePurchase:
    """
    Use Case: Start a credit purchase

    Business Rules:
    1. Only catalog packages can be bought; clients never set their own price
    2. Nothing is persisted if the payment processor is unavailable
    3. Credits are NOT granted here; ConfirmPurchase does that
    """

    def __init__(
        self,
        uow: UnitOfWork,
        purchase_repo: PendingPurchaseRepository,
        payment_gateway: PaymentGateway,
        currency: str = "usd",
    ):
        self.uow = uow
        self.purchase_repo = purchase_repo
        self.payment_gateway = payment_gateway
        self.currency = currency

    async def execute(self, command: InitiatePurchaseCommandDTO) -> Result[InitiatePurchaseResponseDTO]:
        # Step 1: Resolve the catalog package
        package = find_credit_package(
            code=command.package_code,
            amount=command.amount,
            bonus=command.bonus,
            price=command.price,
        )
        if package is None:
            return Return.err(
                Error(
                    code="UNKNOWN_CREDIT_PACKAGE",
                    message="Requested credit package does not exist",
                    reason=(
                        f"package_code={command.package_code}, amount={command.amount}, "
                        f"bonus={command.bonus}, price={command.price}"
                    ),
                )
            )

        # Step 2: Create the payment intent
        try:
            intent = await self.payment_gateway.create_intent(
                amount_cents=package.price_cents,
                currency=self.currency,
                metadata={
                    "user_id": command.user_id,
                    "package_code": package.code,
                    "credits": str(package.total_credits),
                },
            )
        except PaymentGatewayError as e:
            logger.error(f"Payment intent creation failed for user {command.user_id}: {e}")
            return Return.err(
                Error(
                    code="PAYMENT_SYSTEM_UNAVAILABLE",
                    message="Payment system is unavailable, please try again later",
                    reason=str(e),
                )
            )

        # Step 3: Record the pending purchase
        try:
            purchase = await self.purchase_repo.create(
                PendingPurchase(
                    user_id=command.user_id,
                    package_code=package.code,
                    credits_requested=package.total_credits,
                    price_cents=package.price_cents,
                    currency=self.currency,
                    payment_intent_id=intent.id,
                    status=PurchaseStatus.CREATED,
                )
            )
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="INITIATE_PURCHASE_FAILED",
                    message="Failed to initiate purchase",
                    reason=str(e),
                )
            )

        logger.info(
            f"Purchase {purchase.id} created for user {command.user_id}: "
            f"{package.code} ({package.total_credits} credits, intent {intent.id})"
        )

        return Return.ok(
            InitiatePurchaseResponseDTO(
                purchase_id=purchase.id,
                payment_intent_id=intent.id,
                client_secret=intent.client_secret,
                package_code=package.code,
                credits=package.total_credits,
                price_cents=package.price_cents,
                currency=self.currency,
                created_at=purchase.created_at,
            )
        )
