"""
Cross-reference resolution between independently parsed files.

Membership files (child, parent) become plain dicts; resolution then
works against anything exposing `.get(identifier)`, which covers both a
dict and a CollectionWithId.
"""

from typing import Dict, Iterable, Tuple

from transit_refdata.data.errors import UnresolvedReference


def build_membership(pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """
    Build a child -> parent mapping.

    A child listed more than once keeps its last parent; membership
    files are trusted as written.
    """
    membership = {}
    for child_id, parent_id in pairs:
        membership[child_id] = parent_id
    return membership


def resolve(child_id: str, lookup, parent_kind: str = "parent", child_kind: str = "child"):
    """
    Look up the parent of `child_id`.

    Raises:
        UnresolvedReference: `child_id` is unknown to `lookup`
    """
    parent = lookup.get(child_id)
    if parent is None:
        raise UnresolvedReference(child_id, parent_kind, child_kind)
    return parent
