"""Authentication API endpoints."""

import logging
from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.schemas.auth import (
    IdentityResponseSchema,
    LoginRequestSchema,
    LoginResponseSchema,
    UserResponseSchema,
)
from app.schemas.common import ErrorResponseSchema, SuccessResponseSchema
from app.services.audit_service import AuditActions, AuditService
from app.services.container import ServiceContainer
from app.services.credential_service import CredentialService
from app.services.token_service import AuthenticatedIdentity, TokenService
from app.utils.auth import require_capability
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/login", methods=["POST"])
@api.validate(
    json=LoginRequestSchema,
    resp=SpectreeResponse(HTTP_200=LoginResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_401=ErrorResponseSchema),
)
@handle_api_errors
@inject
def login(
    credential_service: CredentialService = Provide[ServiceContainer.credential_service],
    token_service: TokenService = Provide[ServiceContainer.token_service],
    audit_service: AuditService = Provide[ServiceContainer.audit_service],
) -> Any:
    """Exchange a username and password for a session token."""
    data = LoginRequestSchema.model_validate(request.get_json())

    user = credential_service.verify(data.username, data.password)
    token = token_service.issue(user)
    audit_service.record(AuditActions.LOGGED_IN, user.id)

    logger.info("User %s signed in", user.username)
    response = LoginResponseSchema(token=token, user=UserResponseSchema.model_validate(user))
    return response.model_dump(by_alias=True, mode="json")


@auth_bp.route("/logout", methods=["POST"])
@require_capability()
@api.validate(resp=SpectreeResponse(HTTP_200=SuccessResponseSchema, HTTP_401=ErrorResponseSchema))
@handle_api_errors
@inject
def logout(
    identity: AuthenticatedIdentity,
    audit_service: AuditService = Provide[ServiceContainer.audit_service],
) -> Any:
    """Record the end of a session.

    Tokens are not revocable; the client discards its token.
    """
    audit_service.record(AuditActions.LOGGED_OUT, identity.user_id)
    return SuccessResponseSchema(success=True).model_dump()


@auth_bp.route("/me", methods=["GET"])
@require_capability()
@api.validate(resp=SpectreeResponse(HTTP_200=IdentityResponseSchema, HTTP_401=ErrorResponseSchema))
@handle_api_errors
def me(identity: AuthenticatedIdentity) -> Any:
    """Return the identity carried by the caller's token."""
    return IdentityResponseSchema(
        user_id=identity.user_id,
        username=identity.username,
        role=identity.role,
    ).model_dump(by_alias=True, mode="json")
