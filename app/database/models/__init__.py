from .user_model import User
from .listing_model import Listing, Land, House, Apartment, LISTING_MODELS
from .favorite_model import Favorite
from .purchase_model import Purchase
from .payment_model import Payment

__all__ = ["User", "Listing", "Land", "House", "Apartment", "LISTING_MODELS", "Favorite", "Purchase", "Payment"]
