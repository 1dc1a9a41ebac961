"""Encoding of roles as Keto relation tuples.

A role ``R`` is the subject set ``role:R#member``. Child ``C`` inheriting
parent ``P`` is written as ``role:P#member@(role:C#member)``; a grant of
``action`` on ``resource`` as ``<resource>#<action>@(role:R#member)``.
"""

from rolegraph.domain.entities import Role, RolePermission
from rolegraph.domain.value_objects import RelationTuple, SubjectSet

ROLE_PREFIX = "role:"
MEMBER_RELATION = "member"
DEFAULT_COLLECTION = "items"


def role_object(name: str) -> str:
    return f"{ROLE_PREFIX}{name}"


def member_set(namespace: str, name: str) -> SubjectSet:
    return SubjectSet(namespace=namespace, object=role_object(name), relation=MEMBER_RELATION)


def normalize_resource(resource: str, collection: str = DEFAULT_COLLECTION) -> str:
    """``product`` -> ``product:items``; qualified resources are left alone."""
    return resource if ":" in resource else f"{resource}:{collection}"


def display_resource(resource: str, collection: str = DEFAULT_COLLECTION) -> str:
    """Inverse of normalize_resource for the default collection."""
    suffix = f":{collection}"
    return resource[: -len(suffix)] if resource.endswith(suffix) else resource


def hierarchy_tuple(namespace: str, child: str, parent: str) -> RelationTuple:
    return RelationTuple(
        namespace=namespace,
        object=role_object(parent),
        relation=MEMBER_RELATION,
        subject_set=member_set(namespace, child),
    )


def permission_tuple(
    namespace: str, name: str, permission: RolePermission, collection: str = DEFAULT_COLLECTION
) -> RelationTuple:
    return RelationTuple(
        namespace=namespace,
        object=normalize_resource(permission.resource, collection),
        relation=permission.action,
        subject_set=member_set(namespace, name),
    )


def hierarchy_tuples(role: Role) -> list[RelationTuple]:
    return [hierarchy_tuple(role.namespace, role.name, parent) for parent in role.inherits_from]


def permission_tuples(role: Role, collection: str = DEFAULT_COLLECTION) -> list[RelationTuple]:
    return [
        permission_tuple(role.namespace, role.name, permission, collection)
        for permission in role.permissions
    ]


def is_hierarchy_tuple(relation_tuple: RelationTuple) -> bool:
    return (
        relation_tuple.object.startswith(ROLE_PREFIX)
        and relation_tuple.relation == MEMBER_RELATION
    )
