"""List roles use case."""

from rolegraph.application.ports import RoleCatalog
from rolegraph.domain.entities import Role


class ListRolesUseCase:
    """List roles of a namespace visible to a tenant."""

    def __init__(self, catalog: RoleCatalog) -> None:
        self._catalog = catalog

    async def execute(self, namespace: str, tenant_id: str | None = None) -> list[Role]:
        return self._catalog.list_by_namespace(namespace, tenant_id)
