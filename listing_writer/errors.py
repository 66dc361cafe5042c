"""
Error taxonomy for the listing form.

Every error carries a user-facing ``message``; callers catch at the
operation boundary and show that message, nothing is fatal.
"""


class ListingError(Exception):
    default_message = "An error occurred"

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ListingError):
    """Input failed a field rule. Shown inline next to the field."""

    default_message = "Invalid input data. Please check your entries."


class ServiceLookupError(ListingError):
    """The vPIC service failed or returned nothing usable."""

    default_message = "Lookup failed"


class ConfigurationError(ListingError):
    """A required credential is missing."""

    default_message = "Service is not configured"


class GenerationError(ListingError):
    default_message = "Failed to generate description"
