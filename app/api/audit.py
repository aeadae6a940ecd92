"""Audit log API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.exceptions import AuthorizationException
from app.schemas.audit import AuditCreateSchema, AuditEntryResponseSchema
from app.schemas.common import ErrorResponseSchema, SuccessResponseSchema
from app.services.audit_service import AuditService
from app.services.container import ServiceContainer
from app.services.token_service import AuthenticatedIdentity
from app.utils.auth import Capability, require_capability
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

audit_bp = Blueprint("audit", __name__, url_prefix="/audit")


@audit_bp.route("", methods=["GET"])
@require_capability(Capability.READ_AUDIT)
@api.validate(resp=SpectreeResponse(HTTP_200=list[AuditEntryResponseSchema], HTTP_403=ErrorResponseSchema))
@handle_api_errors
@inject
def list_audit_entries(
    identity: AuthenticatedIdentity,
    audit_service: AuditService = Provide[ServiceContainer.audit_service],
) -> Any:
    """List audit entries, newest first."""
    return [
        AuditEntryResponseSchema(
            id=entry.id,
            action=entry.action,
            date=entry.date,
            user_id=entry.user_id,
            user_name=entry.user.name,
            role=entry.user.role,
        ).model_dump(by_alias=True, mode="json")
        for entry in audit_service.list_entries()
    ]


@audit_bp.route("", methods=["POST"])
@require_capability(Capability.WRITE_AUDIT)
@api.validate(
    json=AuditCreateSchema,
    resp=SpectreeResponse(HTTP_200=SuccessResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_503=SuccessResponseSchema),
)
@handle_api_errors
@inject
def create_audit_entry(
    identity: AuthenticatedIdentity,
    audit_service: AuditService = Provide[ServiceContainer.audit_service],
) -> Any:
    """Record a client-reported action for the caller."""
    data = AuditCreateSchema.model_validate(request.get_json())

    if data.user_id is not None and data.user_id != identity.user_id:
        raise AuthorizationException("write an audit entry on behalf of another user")

    entry = audit_service.record(data.action, identity.user_id)
    if entry is None:
        return SuccessResponseSchema(success=False).model_dump(), 503
    return SuccessResponseSchema(success=True).model_dump()
