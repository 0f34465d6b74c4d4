# veris_search/incidents/paths.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

# ------------------------------------------------------------------------------
# known VERIS paths
# ------------------------------------------------------------------------------

FREE_TEXT_FIELDS: Tuple[str, ...] = (
    "summary",
    "incident_id",
    "victim.name",
    "victim.industry",
    "victim.country",
    "victim.state",
    "reference",
    "confidence",
    "targeted",
    "security_incident",
)

ACTOR_VARIETY_PATHS: Tuple[str, ...] = (
    "actor.external.variety",
    "actor.internal.variety",
    "actor.partner.variety",
)

ACTION_VARIETY_PATHS: Tuple[str, ...] = (
    "action.hacking.variety",
    "action.misuse.variety",
    "action.social.variety",
    "action.physical.variety",
    "action.malware.variety",
)

ASSET_ARRAY_PATH = "asset.assets"
ASSET_VARIETY_FIELD = "variety"
ASSET_VARIETY_PATH = f"{ASSET_ARRAY_PATH}.{ASSET_VARIETY_FIELD}"


# ------------------------------------------------------------------------------
# resolved values
# ------------------------------------------------------------------------------

@dataclass(frozen=True)
class Absent:
    def values(self) -> List[Any]:
        return []


@dataclass(frozen=True)
class Scalar:
    value: Any

    def values(self) -> List[Any]:
        return [self.value]


@dataclass(frozen=True)
class Many:
    items: Tuple[Any, ...]

    def values(self) -> List[Any]:
        return list(self.items)


FieldValue = Union[Absent, Scalar, Many]

ABSENT = Absent()


def _walk(node: Any, parts: List[str]) -> List[Any]:
    # Dotted traversal that fans out over arrays, the way MongoDB reads
    # "asset.assets.variety" across every element of asset.assets.
    if not parts:
        if isinstance(node, list):
            return list(node)
        return [node]

    if isinstance(node, list):
        out: List[Any] = []
        for item in node:
            out.extend(_walk(item, parts))
        return out

    if not isinstance(node, dict) or parts[0] not in node:
        return []

    child = node[parts[0]]
    if child is None:
        return []
    return _walk(child, parts[1:])


def resolve(doc: Dict[str, Any], path: str) -> FieldValue:
    """
    Read a dotted path out of a semi-structured incident.

    Missing intermediate objects resolve to Absent. A single non-array leaf
    is a Scalar; anything reached through or ending in an array is Many.
    """
    parts = path.split(".")
    head = doc
    for i, part in enumerate(parts):
        if isinstance(head, list):
            values = tuple(_walk(head, parts[i:]))
            return Many(values) if values else ABSENT
        if not isinstance(head, dict) or part not in head or head[part] is None:
            return ABSENT
        head = head[part]

    if isinstance(head, list):
        return Many(tuple(head))
    return Scalar(head)
