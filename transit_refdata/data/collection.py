"""
Identifier-indexed collections.

A CollectionWithId keeps its objects in insertion order (list) and
indexes them by their `id` attribute (dict), so iteration is
deterministic and lookup is O(1). Identifiers are unique: inserting a
known identifier raises DuplicateIdentifier and never replaces the
stored object.
"""

from typing import Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

from .errors import DuplicateIdentifier

T = TypeVar("T")


class CollectionWithId(Generic[T]):

    def __init__(self, objects: Iterable[T] = (), name: str = "collection"):
        self.name = name
        self._objects: List[T] = []
        self._index: Dict[str, int] = {}
        for obj in objects:
            self.insert(obj)

    def insert(self, obj: T) -> int:
        """
        Add an object, keyed by its `id`.

        Returns:
            Position of the object in iteration order

        Raises:
            DuplicateIdentifier: the identifier is already present
        """
        identifier = obj.id
        if identifier in self._index:
            raise DuplicateIdentifier(identifier, self.name)
        idx = len(self._objects)
        self._objects.append(obj)
        self._index[identifier] = idx
        return idx

    push = insert

    def get(self, identifier: str) -> Optional[T]:
        idx = self._index.get(identifier)
        if idx is None:
            return None
        return self._objects[idx]

    def get_idx(self, identifier: str) -> Optional[int]:
        return self._index.get(identifier)

    def merge(self, other: Iterable[T]):
        """
        Insert every object of `other`, in its iteration order.

        Stops at the first colliding identifier and raises
        DuplicateIdentifier. Objects inserted before the collision stay;
        a collision is fatal for the run, so nothing is rolled back.
        """
        for obj in other:
            self.insert(obj)

    try_merge = merge

    def ids(self) -> List[str]:
        return [obj.id for obj in self._objects]

    def values(self) -> List[T]:
        return list(self._objects)

    def is_empty(self) -> bool:
        return not self._objects

    def __getitem__(self, idx: int) -> T:
        return self._objects[idx]

    def __contains__(self, identifier) -> bool:
        return identifier in self._index

    def __iter__(self) -> Iterator[T]:
        return iter(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __repr__(self):
        return f"<CollectionWithId(name='{self.name}', size={len(self)})>"
