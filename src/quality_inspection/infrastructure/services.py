"""Dependency injection and service factory."""

from typing import AsyncGenerator, Optional, Tuple
from contextlib import asynccontextmanager

from src.quality_inspection.application.ports.repositories import (
    ChecklistTemplateRepository,
    InspectionResultRepository
)
from src.quality_inspection.application.services.checklist_template_service import ChecklistTemplateService
from src.quality_inspection.application.services.inspection_service import InspectionService
from src.quality_inspection.application.services.quality_metrics_service import QualityMetricsService
from src.quality_inspection.infrastructure.database.connection import DatabaseManager
from src.quality_inspection.infrastructure.logging import get_logger
from src.quality_inspection.infrastructure.repositories.memory_repositories import (
    InMemoryChecklistTemplateRepository,
    InMemoryInspectionResultRepository
)
from src.quality_inspection.infrastructure.repositories.sql_repositories import (
    SQLAlchemyChecklistTemplateRepository,
    SQLAlchemyInspectionResultRepository
)

MEMORY_BACKEND = "memory"
SQL_BACKEND = "sql"

logger = get_logger(__name__)


class ServiceFactory:
    """Factory for creating application services with proper dependencies.

    The ``memory`` backend keeps one pair of repositories for the lifetime of
    the factory; the ``sql`` backend opens one session per service scope.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        backend: str = SQL_BACKEND,
        echo: bool = False,
        pool_pre_ping: bool = True
    ):
        if backend not in (MEMORY_BACKEND, SQL_BACKEND):
            raise ValueError(f"Unknown repository backend: {backend}")
        if backend == SQL_BACKEND and not database_url:
            raise ValueError("A database URL is required for the sql backend")

        self.backend = backend
        self.database_manager = (
            DatabaseManager(database_url, echo=echo, pool_pre_ping=pool_pre_ping)
            if backend == SQL_BACKEND else None
        )
        self._connected = False
        self._template_repository = InMemoryChecklistTemplateRepository()
        self._inspection_repository = InMemoryInspectionResultRepository()

    async def initialize(self):
        """Initialize the service factory."""
        if self.database_manager is not None and not self._connected:
            await self.database_manager.connect()
            self._connected = True
        logger.info(f"Service factory initialized with {self.backend} backend")

    async def shutdown(self):
        """Shutdown the service factory."""
        if self.database_manager is not None and self._connected:
            await self.database_manager.disconnect()
            self._connected = False

    @asynccontextmanager
    async def get_inspection_service(self) -> AsyncGenerator[InspectionService, None]:
        """Get inspection service bound to the configured repositories."""
        async with self._repositories() as (template_repo, inspection_repo):
            yield InspectionService(
                inspection_repository=inspection_repo,
                template_repository=template_repo
            )

    @asynccontextmanager
    async def get_checklist_service(self) -> AsyncGenerator[ChecklistTemplateService, None]:
        """Get checklist template service."""
        async with self._repositories() as (template_repo, _):
            yield ChecklistTemplateService(template_repository=template_repo)

    @asynccontextmanager
    async def get_metrics_service(self) -> AsyncGenerator[QualityMetricsService, None]:
        """Get quality metrics service."""
        async with self._repositories() as (_, inspection_repo):
            yield QualityMetricsService(inspection_repository=inspection_repo)

    @asynccontextmanager
    async def _repositories(
        self
    ) -> AsyncGenerator[Tuple[ChecklistTemplateRepository, InspectionResultRepository], None]:
        if self.database_manager is None:
            yield self._template_repository, self._inspection_repository
            return

        async with self.database_manager.get_session() as session:
            yield (
                SQLAlchemyChecklistTemplateRepository(session),
                SQLAlchemyInspectionResultRepository(session)
            )


# Global service factory instance
_service_factory: ServiceFactory | None = None


def get_service_factory() -> ServiceFactory:
    """Get the global service factory instance."""
    global _service_factory

    if _service_factory is None:
        from src.quality_inspection.presentation.api.config import get_settings

        settings = get_settings()
        _service_factory = ServiceFactory(
            database_url=settings.database_url,
            backend=settings.repository_backend,
            echo=settings.debug,
            pool_pre_ping=settings.db_pool_pre_ping
        )

    return _service_factory


async def initialize_services():
    """Initialize application services."""
    factory = get_service_factory()
    await factory.initialize()


async def shutdown_services():
    """Shutdown application services."""
    factory = get_service_factory()
    await factory.shutdown()
