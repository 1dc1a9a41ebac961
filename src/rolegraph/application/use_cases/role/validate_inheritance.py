"""Dry-run inheritance validation use case."""

from rolegraph.application.ports import RoleCatalog
from rolegraph.application.use_cases.role.common import clean_name, clean_parents
from rolegraph.domain.services.inheritance_graph import (
    DEFAULT_MAX_DEPTH,
    InheritanceValidation,
    validate_inheritance,
)


class ValidateInheritanceUseCase:
    """Validate a proposed parent list without touching any state."""

    def __init__(self, catalog: RoleCatalog, max_inheritance_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._catalog = catalog
        self._max_depth = max_inheritance_depth

    async def execute(
        self, namespace: str, name: str, inherits_from: list[str]
    ) -> InheritanceValidation:
        return validate_inheritance(
            clean_name(name),
            clean_parents(inherits_from) or [],
            self._catalog.inheritance_edges(namespace),
            self._max_depth,
        )
