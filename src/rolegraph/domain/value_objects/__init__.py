"""Domain value objects."""

from rolegraph.domain.value_objects.relation_tuple import RelationTuple, SubjectSet
from rolegraph.domain.value_objects.sync_status import SyncStatus

__all__ = [
    "RelationTuple",
    "SubjectSet",
    "SyncStatus",
]
