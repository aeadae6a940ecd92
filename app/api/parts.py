"""Parts catalog API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.models.part import Part
from app.schemas.common import ErrorResponseSchema
from app.schemas.part import PartCreateSchema, PartResponseSchema, PartUpdateSchema
from app.services.audit_service import AuditActions, AuditService
from app.services.container import ServiceContainer
from app.services.part_service import PartService
from app.services.stock_service import StockService
from app.services.token_service import AuthenticatedIdentity
from app.utils.auth import Capability, require_capability
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

parts_bp = Blueprint("parts", __name__, url_prefix="/parts")


def part_to_dict(part: Part) -> dict[str, Any]:
    """Serialize a part with camelCase keys."""
    return PartResponseSchema.model_validate(part).model_dump(by_alias=True, mode="json")


@parts_bp.route("", methods=["GET"])
@require_capability(Capability.READ_CATALOG)
@api.validate(resp=SpectreeResponse(HTTP_200=list[PartResponseSchema], HTTP_401=ErrorResponseSchema, HTTP_403=ErrorResponseSchema))
@handle_api_errors
@inject
def list_parts(
    identity: AuthenticatedIdentity,
    part_service: PartService = Provide[ServiceContainer.part_service],
) -> Any:
    """List all parts in the catalog."""
    return [part_to_dict(part) for part in part_service.list_parts()]


@parts_bp.route("/<int:part_id>", methods=["GET"])
@require_capability(Capability.READ_CATALOG)
@api.validate(resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_part(
    part_id: int,
    identity: AuthenticatedIdentity,
    part_service: PartService = Provide[ServiceContainer.part_service],
) -> Any:
    """Get a single part."""
    return part_to_dict(part_service.get_part(part_id))


@parts_bp.route("", methods=["POST"])
@require_capability(Capability.WRITE_CATALOG)
@api.validate(json=PartCreateSchema, resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_403=ErrorResponseSchema))
@handle_api_errors
@inject
def create_part(
    identity: AuthenticatedIdentity,
    stock_service: StockService = Provide[ServiceContainer.stock_service],
    audit_service: AuditService = Provide[ServiceContainer.audit_service],
) -> Any:
    """Create a new part, booking any opening quantity as a receipt."""
    data = PartCreateSchema.model_validate(request.get_json())

    part = stock_service.create_part_with_opening_stock(
        attrs=data.model_dump(exclude={"quantity"}),
        quantity=data.quantity,
        user_id=identity.user_id,
    )
    audit_service.record(AuditActions.part_added(part.part_number), identity.user_id)

    return part_to_dict(part)


@parts_bp.route("/<int:part_id>", methods=["PUT"])
@require_capability(Capability.WRITE_CATALOG)
@api.validate(
    json=PartUpdateSchema,
    resp=SpectreeResponse(
        HTTP_200=PartResponseSchema,
        HTTP_400=ErrorResponseSchema,
        HTTP_403=ErrorResponseSchema,
        HTTP_404=ErrorResponseSchema,
        HTTP_409=ErrorResponseSchema,
    ),
)
@handle_api_errors
@inject
def update_part(
    part_id: int,
    identity: AuthenticatedIdentity,
    part_service: PartService = Provide[ServiceContainer.part_service],
    audit_service: AuditService = Provide[ServiceContainer.audit_service],
) -> Any:
    """Update part attributes. Quantity changes are rejected."""
    data = PartUpdateSchema.model_validate(request.get_json())

    # Only pass fields that were explicitly provided in the request
    update_fields = data.model_dump(exclude_unset=True)
    part = part_service.update_part(part_id, **update_fields)
    audit_service.record(AuditActions.part_updated(part.part_number), identity.user_id)

    return part_to_dict(part)
