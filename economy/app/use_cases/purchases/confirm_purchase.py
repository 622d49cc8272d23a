"""ConfirmPurchase Use Case

Verifies a payment with the processor and grants the purchased credits
at most once per payment intent.
"""

import logging
from typing import Optional
from economy.libs.clock import utc_now
from economy.libs.result import Result, Return, Error
from economy.app.services.unit_of_work import UnitOfWork
from economy.app.services.ledger_writer import LedgerWriter
from economy.app.services.notification_service import NotificationService, dispatch_ledger_events
from economy.app.services.payment_gateway import (
    PaymentGateway,
    PaymentGatewayError,
    IN_FLIGHT_STATUSES,
)
from economy.app.repositories.ledger_entry_repository import (
    LedgerEntryRepository,
    DuplicateLedgerEntryError,
)
from economy.app.repositories.pending_purchase_repository import PendingPurchaseRepository
from economy.app.use_cases.ledger.dtos import BalanceResponseDTO
from economy.domain.balance import project_balance
from economy.domain.ledger_entry import EventType, LedgerEntry, LedgerEntryKind
from economy.domain.pending_purchase import PurchaseStatus
from .dtos import ConfirmPurchaseCommandDTO

logger = logging.getLogger(__name__)


def _already_processed(payment_intent_id: str, status: PurchaseStatus) -> Error:
    return Error(
        code="ALREADY_PROCESSED",
        message=f"Purchase for payment {payment_intent_id} was already processed",
        reason=f"status={status.value}",
        details={"status": status.value},
    )


class ConfirmPurchase:
    """
    Use Case: Confirm a credit purchase

    Business Rules:
    1. Only the purchasing user (or a trusted caller) may confirm
    2. A purchase is credited at most once: the CREATED -> CONFIRMED update
       is conditional and the ledger entry carries a unique idempotency key
    3. Processor outages and terminal payment failures close the purchase
       as FAILED; payments still in flight leave it CREATED

    Flow:
    1. Load purchase and check ownership / status
    2. Retrieve the payment intent (bounded timeout)
    3. Conditionally mark CONFIRMED
    4. Post CREDIT_PURCHASE through the ledger writer
    5. Commit and return the re-projected balance
    """

    def __init__(
        self,
        uow: UnitOfWork,
        purchase_repo: PendingPurchaseRepository,
        ledger_repo: LedgerEntryRepository,
        ledger_writer: LedgerWriter,
        payment_gateway: PaymentGateway,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.purchase_repo = purchase_repo
        self.ledger_repo = ledger_repo
        self.ledger_writer = ledger_writer
        self.payment_gateway = payment_gateway
        self.notification_service = notification_service


    async def execute(self, command: ConfirmPurchaseCommandDTO) -> Result[BalanceResponseDTO]:
        # Step 1: Locate purchase
        purchase = await self.purchase_repo.get_by_intent_id(command.payment_intent_id)
        if purchase is None:
            return Return.err(
                Error(
                    code="PURCHASE_NOT_FOUND",
                    message=f"No purchase found for payment {command.payment_intent_id}",
                )
            )

        # A rollback expires the ORM instance; only these values are used below
        purchase_id = purchase.id
        intent_id = purchase.payment_intent_id
        user_id = purchase.user_id
        credits = purchase.credits_requested
        status = PurchaseStatus(purchase.status)

        if command.user_id is not None and user_id != command.user_id:
            return Return.err(
                Error(
                    code="PURCHASE_FORBIDDEN",
                    message="Purchase belongs to another user",
                )
            )

        if status != PurchaseStatus.CREATED:
            logger.warning(f"Duplicate confirmation for payment {intent_id} (status {status.value})")
            return Return.err(_already_processed(intent_id, status))

        # Step 2: Verify with the processor
        try:
            intent = await self.payment_gateway.retrieve_intent(intent_id)
        except PaymentGatewayError as e:
            logger.error(f"Payment verification failed for {intent_id}: {e}")
            await self._fail(purchase_id, "PAYMENT_SYSTEM_UNAVAILABLE")
            return Return.err(
                Error(
                    code="PAYMENT_SYSTEM_UNAVAILABLE",
                    message="Payment system is unavailable; please start a new purchase",
                    reason=str(e),
                )
            )

        if not intent.succeeded:
            in_flight = intent.status in IN_FLIGHT_STATUSES
            if not in_flight:
                await self._fail(purchase_id, f"PAYMENT_{intent.status.upper()}")
            return Return.err(
                Error(
                    code="PAYMENT_NOT_SUCCEEDED",
                    message=f"Payment has not succeeded (status: {intent.status})",
                    details={"status": intent.status, "retryable": in_flight},
                )
            )

        try:
            # Step 3: CREATED -> CONFIRMED, exactly one caller wins
            confirmed = await self.purchase_repo.mark_confirmed(purchase_id, utc_now())
            if not confirmed:
                await self.uow.rollback()
                logger.warning(f"Concurrent confirmation lost for payment {intent_id}")
                return Return.err(_already_processed(intent_id, PurchaseStatus.CONFIRMED))

            # Step 4: Grant credits
            entry = await self.ledger_writer.post(
                LedgerEntry.create(
                    user_id=user_id,
                    kind=LedgerEntryKind.CREDIT_PURCHASE,
                    amount=credits,
                    event_type=EventType.CREDITS_PURCHASED,
                    related_entity_id=purchase_id,
                    idempotency_key=f"purchase:{intent_id}",
                )
            )

            # Step 5: Commit
            await self.uow.commit()

        except DuplicateLedgerEntryError:
            await self.uow.rollback()
            return Return.err(_already_processed(intent_id, PurchaseStatus.CONFIRMED))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CONFIRM_PURCHASE_FAILED",
                    message="Failed to confirm purchase",
                    reason=str(e),
                )
            )

        logger.info(f"Purchase {purchase_id} confirmed: {credits} credits granted to user {user_id}")
        await dispatch_ledger_events(self.notification_service, [entry])

        entries = await self.ledger_repo.list_for_user(user_id)
        return Return.ok(BalanceResponseDTO.from_snapshot(project_balance(user_id, entries)))

    async def _fail(self, purchase_id: str, reason: str) -> None:
        try:
            if await self.purchase_repo.mark_failed(purchase_id, reason):
                logger.warning(f"Purchase {purchase_id} marked FAILED: {reason}")
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to mark purchase {purchase_id} as FAILED: {e}")
