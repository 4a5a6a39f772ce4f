"""Exception hierarchy for catalog access and the name-code registry."""

from __future__ import annotations


class ResolverError(Exception):
    """Base error for the product identity package."""


class StoreError(ResolverError):
    """Raised by a store adapter when a lookup cannot be executed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MappingError(ResolverError):
    """Raised when a product name-code mapping operation is rejected."""


class DuplicateMappingError(MappingError):
    """Raised when a name-code is registered twice."""

    def __init__(self, product_code: str) -> None:
        self.product_code = product_code
        super().__init__(f'Product name-code "{product_code}" is already registered.')


class MappingNotFoundError(MappingError):
    """Raised when a mapping id does not exist."""
