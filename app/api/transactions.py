"""Stock transaction (movement ledger) API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.exceptions import AuthorizationException
from app.models.stock_transaction import StockTransaction
from app.schemas.common import ErrorResponseSchema
from app.schemas.transaction import (
    TransactionCreateSchema,
    TransactionListQuerySchema,
    TransactionResponseSchema,
)
from app.services.audit_service import AuditActions, AuditService
from app.services.container import ServiceContainer
from app.services.stock_service import StockService
from app.services.token_service import AuthenticatedIdentity
from app.utils.auth import Capability, require_capability
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

transactions_bp = Blueprint("transactions", __name__, url_prefix="/transactions")


def _transaction_to_dict(transaction: StockTransaction) -> dict[str, Any]:
    """Serialize a ledger entry with its part number and user name."""
    return TransactionResponseSchema(
        id=transaction.id,
        part_id=transaction.part_id,
        part_number=transaction.part.part_number,
        type=transaction.type,
        quantity=transaction.quantity,
        date=transaction.date,
        reference=transaction.reference,
        note=transaction.note,
        user_id=transaction.user_id,
        user_name=transaction.user.name,
    ).model_dump(by_alias=True, mode="json")


@transactions_bp.route("", methods=["GET"])
@require_capability(Capability.READ_CATALOG)
@api.validate(
    query=TransactionListQuerySchema,
    resp=SpectreeResponse(HTTP_200=list[TransactionResponseSchema], HTTP_400=ErrorResponseSchema),
)
@handle_api_errors
@inject
def list_transactions(
    identity: AuthenticatedIdentity,
    stock_service: StockService = Provide[ServiceContainer.stock_service],
) -> Any:
    """List ledger entries, newest first."""
    query = TransactionListQuerySchema.model_validate(request.args.to_dict())
    return [
        _transaction_to_dict(transaction)
        for transaction in stock_service.list_transactions(part_id=query.part_id)
    ]


@transactions_bp.route("", methods=["POST"])
@require_capability(Capability.RECORD_MOVEMENT)
@api.validate(
    json=TransactionCreateSchema,
    resp=SpectreeResponse(
        HTTP_200=TransactionResponseSchema,
        HTTP_400=ErrorResponseSchema,
        HTTP_403=ErrorResponseSchema,
        HTTP_404=ErrorResponseSchema,
        HTTP_503=ErrorResponseSchema,
    ),
)
@handle_api_errors
@inject
def create_transaction(
    identity: AuthenticatedIdentity,
    stock_service: StockService = Provide[ServiceContainer.stock_service],
    audit_service: AuditService = Provide[ServiceContainer.audit_service],
) -> Any:
    """Record a stock receipt or issue."""
    data = TransactionCreateSchema.model_validate(request.get_json())

    if data.user_id is not None and data.user_id != identity.user_id:
        raise AuthorizationException("record a movement on behalf of another user")

    transaction = stock_service.record_movement(
        part_id=data.part_id,
        movement_type=data.type,
        quantity=data.quantity,
        reference=data.reference,
        note=data.note,
        user_id=identity.user_id,
    )
    response = _transaction_to_dict(transaction)

    audit_service.record(
        AuditActions.movement(data.type, data.quantity, response["partNumber"], data.reference),
        identity.user_id,
    )

    return response
