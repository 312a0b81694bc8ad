"""Selection of the snapshot categories to collect."""

from collections.abc import Iterable, Iterator
from enum import Enum


class Category(Enum):
    """Optional sections of a system snapshot.

    Declaration order is the order in which categories are iterated.
    """

    HOSTNAME = "hostname"
    PLATFORM = "platform"
    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    MAC_ADDRESS = "mac-address"
    PROCESSES = "processes"
    NETWORK_ADAPTERS = "net-adapters"

    @classmethod
    def parse(cls, name: str) -> "Category":
        """Look up a category by value or member name, ignoring case.

        Raises:
            ValueError: If the name matches no category.
        """
        key = name.strip().lower().replace("_", "-")
        for category in cls:
            if key in (category.value, category.name.lower().replace("_", "-")):
                return category
        choices = ", ".join(c.value for c in cls)
        raise ValueError(f"Unknown category {name!r} (expected one of: {choices})")


class IncludeSet:
    """Immutable set of categories requested for one collection call."""

    __slots__ = ("_members",)

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        members = frozenset(categories)
        for category in members:
            if not isinstance(category, Category):
                raise TypeError(f"Expected Category, got {type(category).__name__}")
        self._members = members

    def __contains__(self, category: object) -> bool:
        return category in self._members

    def __iter__(self) -> Iterator[Category]:
        # Stable declaration order, independent of how the set was built
        return (category for category in Category if category in self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IncludeSet):
            return NotImplemented
        return self._members == other._members

    def __hash__(self) -> int:
        return hash(self._members)

    def __repr__(self) -> str:
        names = ", ".join(category.name for category in self)
        return f"IncludeSet({names})"


INCLUDE_ALL = IncludeSet(Category)


def effective_set(categories: Iterable[Category] = ()) -> IncludeSet:
    """
    Determine the categories to collect.

    An empty request selects every category. Otherwise the result is exactly
    the distinct categories given; order and duplicates are irrelevant.
    """
    if isinstance(categories, IncludeSet):
        return categories if len(categories) else INCLUDE_ALL
    requested = IncludeSet(categories)
    if not len(requested):
        return INCLUDE_ALL
    return requested


def includes(include: IncludeSet, category: Category) -> bool:
    """Report whether a category is part of the include set."""
    return category in include
