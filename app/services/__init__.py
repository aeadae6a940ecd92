"""Services package for Aircraft Parts Inventory."""

from app.services.audit_service import AuditService
from app.services.container import ServiceContainer
from app.services.credential_service import CredentialService
from app.services.part_service import PartService
from app.services.report_service import ReportService
from app.services.stock_service import StockService
from app.services.test_data_service import TestDataService
from app.services.token_service import TokenService

__all__ = [
    "AuditService",
    "CredentialService",
    "PartService",
    "ReportService",
    "ServiceContainer",
    "StockService",
    "TestDataService",
    "TokenService",
]
