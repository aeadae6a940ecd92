"""Inventory report API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint
from spectree import Response as SpectreeResponse

from app.schemas.common import ErrorResponseSchema
from app.schemas.part import PartResponseSchema
from app.schemas.report import (
    InventorySummarySchema,
    ReorderItemSchema,
    ShelfLifeItemSchema,
    ShelfLifeReportSchema,
)
from app.services.container import ServiceContainer
from app.services.report_service import ReportService
from app.services.token_service import AuthenticatedIdentity
from app.utils.auth import Capability, require_capability
from app.utils.error_handling import handle_api_errors
from app.utils.spectree_config import api

reports_bp = Blueprint("reports", __name__, url_prefix="/reports")


@reports_bp.route("/summary", methods=["GET"])
@require_capability(Capability.READ_CATALOG)
@api.validate(resp=SpectreeResponse(HTTP_200=InventorySummarySchema, HTTP_403=ErrorResponseSchema))
@handle_api_errors
@inject
def get_summary(
    identity: AuthenticatedIdentity,
    report_service: ReportService = Provide[ServiceContainer.report_service],
) -> Any:
    """Get inventory totals, stock level counts and a per-category breakdown."""
    summary = report_service.get_summary()
    return InventorySummarySchema.model_validate(summary).model_dump(by_alias=True, mode="json")


@reports_bp.route("/reorder", methods=["GET"])
@require_capability(Capability.READ_CATALOG)
@api.validate(resp=SpectreeResponse(HTTP_200=list[ReorderItemSchema], HTTP_403=ErrorResponseSchema))
@handle_api_errors
@inject
def get_reorder_report(
    identity: AuthenticatedIdentity,
    report_service: ReportService = Provide[ServiceContainer.report_service],
) -> Any:
    """Get parts at or below their reorder point."""
    return [
        ReorderItemSchema(
            part=PartResponseSchema.model_validate(row["part"]),
            deficit=row["deficit"],
            deficit_cost=row["deficit_cost"],
        ).model_dump(by_alias=True, mode="json")
        for row in report_service.get_reorder_report()
    ]


@reports_bp.route("/shelf-life", methods=["GET"])
@require_capability(Capability.READ_CATALOG)
@api.validate(resp=SpectreeResponse(HTTP_200=ShelfLifeReportSchema, HTTP_403=ErrorResponseSchema))
@handle_api_errors
@inject
def get_shelf_life_report(
    identity: AuthenticatedIdentity,
    report_service: ReportService = Provide[ServiceContainer.report_service],
) -> Any:
    """Get expired parts and parts expiring within 90 days."""
    report = report_service.get_shelf_life_report()

    def _rows(rows: list[dict[str, Any]]) -> list[ShelfLifeItemSchema]:
        return [
            ShelfLifeItemSchema(
                part=PartResponseSchema.model_validate(row["part"]),
                days_remaining=row["days_remaining"],
            )
            for row in rows
        ]

    return ShelfLifeReportSchema(
        expired=_rows(report["expired"]),
        expiring=_rows(report["expiring"]),
    ).model_dump(by_alias=True, mode="json")
