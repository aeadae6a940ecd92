"""Dependency injection container for services."""

from dependency_injector import containers, providers
from sqlalchemy.orm import sessionmaker

from app.config import Settings
from app.services.audit_service import AuditService
from app.services.credential_service import CredentialService
from app.services.metrics_service import MetricsService
from app.services.part_service import PartService
from app.services.report_service import ReportService
from app.services.stock_service import StockService
from app.services.test_data_service import TestDataService
from app.services.token_service import TokenService


class ServiceContainer(containers.DeclarativeContainer):
    """Container for service dependency injection."""

    # Configuration and database session providers
    config = providers.Dependency(instance_of=Settings)
    session_maker = providers.Dependency(instance_of=sessionmaker)
    db_session = providers.ContextLocalSingleton(
        session_maker.provided.call()
    )

    # Metrics service - Singleton so Prometheus collectors register once
    metrics_service = providers.Singleton(MetricsService)

    # Token service holds no session state
    token_service = providers.Singleton(TokenService, settings=config)

    # Service providers - Factory creates new instances for each request
    credential_service = providers.Factory(
        CredentialService,
        db=db_session,
        metrics_service=metrics_service,
        bcrypt_rounds=config.provided.BCRYPT_ROUNDS,
    )
    part_service = providers.Factory(PartService, db=db_session)
    audit_service = providers.Factory(
        AuditService,
        db=db_session,
        metrics_service=metrics_service,
    )
    report_service = providers.Factory(ReportService, db=db_session)

    # StockService depends on PartService and MetricsService
    stock_service = providers.Factory(
        StockService,
        db=db_session,
        part_service=part_service,
        metrics_service=metrics_service,
    )

    test_data_service = providers.Factory(
        TestDataService,
        db=db_session,
        credential_service=credential_service,
        stock_service=stock_service,
    )
