"""
Queryable collection base class for fluent, composable queries.

Wraps a list of model objects and offers chainable filtering so that
domain collections only need to add their specific filters.
"""

from typing import TypeVar, Generic, Callable, List, Dict, Optional, Any, Union
from collections.abc import Iterable

T = TypeVar('T')


class QueryableCollection(Generic[T]):
    """
    A lightweight, chainable collection for filtering in-memory data.

    Examples:
        # Filter with a predicate
        collection.filter(lambda p: p.has_exit('NORTH')).all()

        # Attribute matching
        collection.where(icao='OFFSH9').first()

        # Grouping
        collection.group_by(lambda p: str(p.procedure_type))
    """

    def __init__(self, items: Union[List[T], Iterable[T]]):
        """
        Initialize a queryable collection.

        Args:
            items: List or iterable of items to wrap
        """
        self._items: List[T] = list(items) if not isinstance(items, list) else items

    def filter(self, predicate: Callable[[T], bool]) -> 'QueryableCollection[T]':
        """
        Filter items using a predicate function.

        Returns:
            New collection of the same class with the matching items
        """
        return self.__class__([item for item in self._items if predicate(item)])

    def where(self, **kwargs) -> 'QueryableCollection[T]':
        """
        Filter items by attribute values. All conditions must match.

        Examples:
            procedures.where(icao='OFFSH9', procedure_type=ProcedureType.SID)
        """
        def matches(item: T) -> bool:
            return all(
                getattr(item, key, None) == value
                for key, value in kwargs.items()
            )
        return self.filter(matches)

    def first(self) -> Optional[T]:
        """Return the first item or None if the collection is empty."""
        return self._items[0] if self._items else None

    def all(self) -> List[T]:
        return self._items

    def count(self) -> int:
        return len(self._items)

    def exists(self) -> bool:
        return len(self._items) > 0

    def group_by(self, key_func: Callable[[T], str]) -> Dict[str, List[T]]:
        """
        Group items by a key function.

        Returns:
            Dictionary mapping keys to lists of items, in first-seen key order
        """
        result: Dict[str, List[T]] = {}
        for item in self._items:
            result.setdefault(key_func(item), []).append(item)
        return result

    def map(self, transform: Callable[[T], Any]) -> 'QueryableCollection[Any]':
        """
        Transform each item using a function.

        Examples:
            # Extract procedure identifiers
            icaos = procedures.map(lambda p: p.icao).all()
        """
        return QueryableCollection([transform(item) for item in self._items])

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return len(self._items) > 0

    def __repr__(self):
        class_name = self.__class__.__name__
        count = len(self._items)

        if count == 0:
            return f"{class_name}([])"

        preview_items = []
        for item in self._items[:3]:
            if hasattr(item, 'icao'):
                preview_items.append(repr(item.icao))
            else:
                preview_items.append(f"<{type(item).__name__}>")
        if count > 3:
            preview_items.append('...')

        return f"{class_name}([{', '.join(preview_items)}], count={count})"
