"""Credit Purchase Routes

Package catalog, payment initiation, client-side confirmation and the
processor webhook.
"""

import json
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession
from economy.adapter.repositories import (
    SqlAlchemyLedgerEntryRepository,
    SqlAlchemyPendingPurchaseRepository,
    SqlAlchemyUserBalanceRepository,
)
from economy.adapter.services import SqlAlchemyUnitOfWork
from economy.api.auth import Principal, get_current_principal, verify_webhook_signature
from economy.api.error import ClientError
from economy.api.schemas.economy_request import ConfirmPurchaseRequestSchema, PurchaseRequestSchema
from economy.app.services import LedgerWriter, NotificationService, PaymentGateway
from economy.app.use_cases.ledger import BalanceResponseDTO
from economy.app.use_cases.purchases import (
    ConfirmPurchase,
    ConfirmPurchaseCommandDTO,
    InitiatePurchase,
    InitiatePurchaseCommandDTO,
    InitiatePurchaseResponseDTO,
    ListCreditPackages,
    ListCreditPackagesResponseDTO,
)
from economy.depends import get_notification_service, get_payment_gateway, get_session
from economy.domain.pending_purchase import PurchaseStatus
from economy.libs.result import Error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/economy/credits", tags=["Credits"])

SIGNATURE_HEADER = "X-Payment-Signature"
SUCCEEDED_EVENT = "payment_intent.succeeded"


def _confirm_purchase(
    session: AsyncSession,
    payment_gateway: PaymentGateway,
    notification_service: NotificationService,
) -> ConfirmPurchase:
    ledger_repo = SqlAlchemyLedgerEntryRepository(session)
    return ConfirmPurchase(
        uow=SqlAlchemyUnitOfWork(session),
        purchase_repo=SqlAlchemyPendingPurchaseRepository(session),
        ledger_repo=ledger_repo,
        ledger_writer=LedgerWriter(ledger_repo, SqlAlchemyUserBalanceRepository(session)),
        payment_gateway=payment_gateway,
        notification_service=notification_service,
    )


@router.get("/packages", response_model=ListCreditPackagesResponseDTO)
async def list_packages(request: Request):
    result = await ListCreditPackages(request.app.state.config.PAYMENT_CURRENCY).execute()
    return result.value


@router.post(
    "/purchase",
    response_model=InitiatePurchaseResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Unknown package",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "UNKNOWN_CREDIT_PACKAGE",
                            "message": "Unknown credit package: GOLD"
                        }
                    }
                }
            }
        },
        503: {"description": "Payment processor unavailable"},
    }
)
async def initiate_purchase(
    body: PurchaseRequestSchema,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Start buying a credit package.

    Creates a payment intent for the package price and records a pending
    purchase. No credits are granted until the payment is confirmed.

    **Request body:**
    - `package_code`: one of the catalog codes, or
    - `amount`, `bonus`, `price`: the exact package triple

    **Returns:**
    - 201: Payment intent reference and client secret
    - 400: Unknown package
    - 503: Payment processor unreachable
    """
    use_case = InitiatePurchase(
        uow=SqlAlchemyUnitOfWork(session),
        purchase_repo=SqlAlchemyPendingPurchaseRepository(session),
        payment_gateway=payment_gateway,
        currency=request.app.state.config.PAYMENT_CURRENCY,
    )
    command = InitiatePurchaseCommandDTO(
        user_id=principal.user_id,
        package_code=body.package_code,
        amount=body.amount,
        bonus=body.bonus,
        price=body.price,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)
    return result.value


@router.post(
    "/confirm",
    response_model=BalanceResponseDTO,
    responses={
        409: {
            "description": "Purchase already settled",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ALREADY_PROCESSED",
                            "message": "Purchase pi_3NxYz was already processed"
                        }
                    }
                }
            }
        },
        402: {"description": "Payment has not succeeded"},
        503: {"description": "Payment processor unavailable"},
    }
)
async def confirm_purchase(
    body: ConfirmPurchaseRequestSchema,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Confirm a purchase after the client completed payment.

    Credits the package exactly once per payment intent. Repeating the call
    returns 409 ALREADY_PROCESSED and grants nothing.
    """
    use_case = _confirm_purchase(session, payment_gateway, notification_service)
    result = await use_case.execute(
        ConfirmPurchaseCommandDTO(payment_intent_id=body.payment_intent_id, user_id=principal.user_id)
    )

    if result.is_err():
        raise ClientError(result.error)
    return result.value


def _event_intent_id(event: dict) -> Optional[str]:
    """Payment intent id from data.object.id, or from data.id for flat payloads"""
    data = event.get("data") or {}
    if not isinstance(data, dict):
        return None
    intent = data.get("object")
    if isinstance(intent, dict) and intent.get("id"):
        return intent["id"]
    intent_id = data.get("id")
    return intent_id if isinstance(intent_id, str) else None


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    signature: Optional[str] = Header(default=None, alias=SIGNATURE_HEADER),
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Payment processor callback.

    The raw body must carry a hex HMAC-SHA256 signature made with the
    shared webhook secret. Only `payment_intent.succeeded` events are
    acted on; the confirmation itself runs through the same path as the
    client-side confirm, so a webhook racing the client credits once.

    The intent id is read from `data.object.id` or, for flat payloads,
    `data.id`. A success for a purchase already closed as FAILED is
    acknowledged with status `requires_review` and logged as an error.
    """
    payload = await request.body()
    if not verify_webhook_signature(payload, signature, request.app.state.config.PAYMENT_WEBHOOK_SECRET):
        raise ClientError(Error(code="INVALID_SIGNATURE", message="Webhook signature mismatch"))

    try:
        event = json.loads(payload)
    except ValueError as e:
        raise ClientError(
            Error(code="INVALID_PAYLOAD", message="Webhook body is not valid JSON", reason=str(e))
        ) from e

    if not isinstance(event, dict):
        raise ClientError(Error(code="INVALID_PAYLOAD", message="Webhook body must be a JSON object"))

    if event.get("type") != SUCCEEDED_EVENT:
        return {"received": True, "status": "ignored"}

    intent_id = _event_intent_id(event)
    if not intent_id:
        raise ClientError(Error(code="INVALID_PAYLOAD", message="Webhook event has no payment intent"))

    result = await _confirm_purchase(session, payment_gateway, notification_service).execute(
        ConfirmPurchaseCommandDTO(payment_intent_id=intent_id)
    )

    if result.is_ok():
        return {"received": True, "status": "confirmed"}
    if result.error.code == "ALREADY_PROCESSED":
        if (result.error.details or {}).get("status") == PurchaseStatus.FAILED.value:
            logger.error(
                f"Payment {intent_id} succeeded after its purchase was closed as FAILED; "
                f"no credits granted, manual reconciliation required"
            )
            return {"received": True, "status": "requires_review"}
        return {"received": True, "status": "already_processed"}
    if result.error.code == "PURCHASE_NOT_FOUND":
        logger.warning(f"Webhook for unknown payment intent {intent_id}")
        return {"received": True, "status": "ignored"}
    raise ClientError(result.error)
