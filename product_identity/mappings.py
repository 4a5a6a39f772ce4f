from __future__ import annotations

"""
Product name-code registry.

Sales staff type a short name-code ("GMC") into forms; the registry maps it to
the full product name ("MALE CONNECTOR") so the form can fill it in. The
resolver does not consult this registry.
"""

from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator

from .errors import DuplicateMappingError, MappingNotFoundError
from .normalize import upper

SYSTEM_USER = "system"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProductMapping(BaseModel):
    id: str
    product_code: str
    product_name: str
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    created_by: str = SYSTEM_USER
    updated_by: str = SYSTEM_USER

    @field_validator("product_code", mode="before")
    @classmethod
    def _upper_code(cls, v) -> str:
        return upper(v)


class ProductMappingRegistry:
    """In-memory name-code registry with the same operations as the admin screen."""

    def __init__(self) -> None:
        self._by_id: Dict[str, ProductMapping] = {}
        self._ids = count(1)

    def __len__(self) -> int:
        return len(self._by_id)

    def get_by_code(self, product_code: str) -> Optional[ProductMapping]:
        code = upper(product_code)
        if not code:
            return None
        for mapping in self._by_id.values():
            if mapping.product_code == code:
                return mapping
        return None

    def list_all(self) -> List[ProductMapping]:
        return sorted(self._by_id.values(), key=lambda m: m.product_code)

    def add(self, product_code: str, product_name: str, user_id: str | None = None) -> str:
        if self.get_by_code(product_code) is not None:
            raise DuplicateMappingError(upper(product_code))
        user = user_id or SYSTEM_USER
        mapping = ProductMapping(
            id=f"mapping-{next(self._ids)}",
            product_code=product_code,
            product_name=product_name.strip(),
            created_by=user,
            updated_by=user,
        )
        self._by_id[mapping.id] = mapping
        logger.info("Added name-code mapping {} -> {}", mapping.product_code, mapping.product_name)
        return mapping.id

    def update(self, mapping_id: str, product_name: str, user_id: str | None = None) -> ProductMapping:
        """Rename the product behind a mapping; the code itself is immutable."""
        current = self._by_id.get(mapping_id)
        if current is None:
            raise MappingNotFoundError(f"No mapping with id {mapping_id!r}")
        updated = current.model_copy(
            update={
                "product_name": product_name.strip(),
                "updated_at": _now(),
                "updated_by": user_id or SYSTEM_USER,
            }
        )
        self._by_id[mapping_id] = updated
        return updated

    def delete(self, mapping_id: str) -> None:
        if self._by_id.pop(mapping_id, None) is None:
            raise MappingNotFoundError(f"No mapping with id {mapping_id!r}")

    def expand_name_code(self, text: str | None) -> Optional[ProductMapping]:
        """Mapping for a name-code typed into a product-name field, if any."""
        return self.get_by_code(upper(text))
