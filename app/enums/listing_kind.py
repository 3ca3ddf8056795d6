from enum import Enum


class ListingKind(str, Enum):
    """Enum for the kinds of property listings"""

    LAND = "land"
    HOUSE = "house"
    APARTMENT = "apartment"

    @property
    def label(self) -> str:
        """Capitalised name used as the favorite discriminator ("Land", ...)."""
        return self.value.capitalize()

    @property
    def plural(self) -> str:
        return f"{self.value}s"

    def __str__(self):
        return self.value
