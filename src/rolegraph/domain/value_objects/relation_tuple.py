"""Zanzibar relation tuple value objects."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SubjectSet:
    """All subjects that have ``relation`` on ``namespace:object``."""

    namespace: str
    object: str
    relation: str

    def __str__(self) -> str:
        return f"{self.namespace}:{self.object}#{self.relation}"


@dataclass(frozen=True)
class RelationTuple:
    """One (namespace, object, relation, subject) fact.

    Exactly one of ``subject_id`` and ``subject_set`` is set.
    """

    namespace: str
    object: str
    relation: str
    subject_id: str | None = None
    subject_set: SubjectSet | None = None

    def __post_init__(self) -> None:
        if (self.subject_id is None) == (self.subject_set is None):
            raise ValueError("RelationTuple needs exactly one of subject_id or subject_set")

    def __str__(self) -> str:
        subject = self.subject_id if self.subject_id is not None else f"({self.subject_set})"
        return f"{self.namespace}:{self.object}#{self.relation}@{subject}"

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the Keto write API."""
        payload: dict[str, Any] = {
            "namespace": self.namespace,
            "object": self.object,
            "relation": self.relation,
        }
        if self.subject_set is not None:
            payload["subject_set"] = {
                "namespace": self.subject_set.namespace,
                "object": self.subject_set.object,
                "relation": self.subject_set.relation,
            }
        else:
            payload["subject_id"] = self.subject_id
        return payload

    def to_query(self) -> dict[str, str]:
        """Exact-match query parameters (delete and check endpoints)."""
        query = {
            "namespace": self.namespace,
            "object": self.object,
            "relation": self.relation,
        }
        if self.subject_set is not None:
            query.update(subject_set_query(self.subject_set))
        else:
            query["subject_id"] = self.subject_id
        return query

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "RelationTuple":
        """Build from a Keto API tuple object."""
        subject_set = data.get("subject_set")
        return cls(
            namespace=data["namespace"],
            object=data["object"],
            relation=data["relation"],
            subject_id=data.get("subject_id") if not subject_set else None,
            subject_set=SubjectSet(
                namespace=subject_set["namespace"],
                object=subject_set["object"],
                relation=subject_set["relation"],
            )
            if subject_set
            else None,
        )


def subject_set_query(subject_set: SubjectSet) -> dict[str, str]:
    """Flattened ``subject_set.*`` query parameters."""
    return {
        "subject_set.namespace": subject_set.namespace,
        "subject_set.object": subject_set.object,
        "subject_set.relation": subject_set.relation,
    }
