"""Domain-specific exceptions.

The scoring core itself is total and never raises; these cover the
collaborators around it.
"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class CatalogAPIError(DomainException):
    """Opportunity catalog store returned an error or is unavailable"""

    pass


class InvalidCatalogDataError(CatalogAPIError):
    """Catalog rows are malformed or missing required fields"""

    pass
