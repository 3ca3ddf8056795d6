"""Domain exceptions raised by the services and mapped to HTTP errors by the routes."""


class RealEstateError(Exception):
    """Base exception for all application errors."""


class ValidationFailed(RealEstateError, ValueError):
    """Input is well-formed JSON but violates a domain rule (HTTP 400)."""


class InvalidStatusTransition(ValidationFailed):
    def __init__(self, kind, current, target):
        self.kind = kind
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change {kind} status from '{current}' to '{target}'"
        )


class DuplicateFavoriteError(ValidationFailed):
    """The listing is already in the user's favorites."""


class PaymentFinalizedError(ValidationFailed):
    """A completed or failed payment cannot change status again."""


class MediaConfigurationError(RealEstateError):
    """Cloudinary credentials are missing."""


class MediaUploadError(RealEstateError):
    """The CDN rejected or failed an upload."""


class NotFoundError(RealEstateError, LookupError):
    """A referenced record does not exist (HTTP 404)."""
