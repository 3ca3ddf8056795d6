from enum import Enum
from typing import Dict, FrozenSet

from enums.listing_kind import ListingKind


class ListingStatus(str, Enum):
    AVAILABLE = "Available"
    RESERVED = "Reserved"
    SOLD = "Sold"
    FOR_RENT = "For Rent"
    RENTED = "Rented"

    def __str__(self):
        return self.value


RENTAL_STATUSES = frozenset({ListingStatus.FOR_RENT, ListingStatus.RENTED})

# Land is only ever sold, never let.
STATUSES_BY_KIND: Dict[ListingKind, FrozenSet[ListingStatus]] = {
    ListingKind.LAND: frozenset(
        {ListingStatus.AVAILABLE, ListingStatus.RESERVED, ListingStatus.SOLD}
    ),
    ListingKind.HOUSE: frozenset(ListingStatus),
    ListingKind.APARTMENT: frozenset(ListingStatus),
}

TRANSITIONS: Dict[ListingStatus, FrozenSet[ListingStatus]] = {
    ListingStatus.AVAILABLE: frozenset(
        {ListingStatus.RESERVED, ListingStatus.SOLD, ListingStatus.FOR_RENT}
    ),
    ListingStatus.RESERVED: frozenset({ListingStatus.AVAILABLE, ListingStatus.SOLD}),
    ListingStatus.FOR_RENT: frozenset({ListingStatus.RENTED, ListingStatus.AVAILABLE}),
    ListingStatus.RENTED: frozenset({ListingStatus.FOR_RENT}),
    ListingStatus.SOLD: frozenset(),
}


def allowed_statuses(kind: ListingKind) -> FrozenSet[ListingStatus]:
    return STATUSES_BY_KIND[kind]


def can_transition(kind: ListingKind, current: ListingStatus, target: ListingStatus) -> bool:
    """Whether a listing of `kind` may move from `current` to `target`."""
    current = ListingStatus(current)
    target = ListingStatus(target)
    if target not in STATUSES_BY_KIND[kind]:
        return False
    if current == target:
        return True
    return target in TRANSITIONS[current]
