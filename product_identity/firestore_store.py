from __future__ import annotations

"""
Document-store adapter speaking the Firestore REST ``runQuery`` API.

Equality lookups become a single EQUAL field filter; prefix ranges become a
composite AND of GREATER_THAN_OR_EQUAL / LESS_THAN over the same field, which
Firestore serves from its per-field sorted index.
"""

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from . import config
from .config import CatalogEntry, MaterialSpec
from .errors import StoreError
from .pipeline_types import LookupField


def _decode_value(value: Dict[str, Any]) -> Any:
    """Convert one Firestore typed value into plain Python."""
    if "stringValue" in value:
        return value["stringValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return value["doubleValue"]
    if "booleanValue" in value:
        return value["booleanValue"]
    if "nullValue" in value:
        return None
    if "timestampValue" in value:
        return value["timestampValue"]
    if "arrayValue" in value:
        return [_decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return _decode_fields(value["mapValue"].get("fields", {}))
    return None


def _decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _decode_value(v) for k, v in fields.items()}


def _field_filter(field: LookupField, op: str, value: str) -> Dict[str, Any]:
    return {
        "fieldFilter": {
            "field": {"fieldPath": field.value},
            "op": op,
            "value": {"stringValue": value},
        }
    }


def document_to_entry(document: Dict[str, Any]) -> Optional[CatalogEntry]:
    """
    Build a CatalogEntry from a REST document; None if it does not validate.

    Materials are validated one by one so a single bad option does not hide
    the rest of the entry.
    """
    doc_id = str(document.get("name", "")).rsplit("/", 1)[-1]
    data = _decode_fields(document.get("fields", {}))
    data["id"] = doc_id
    raw_materials = data.get("materials")
    if not isinstance(raw_materials, list):
        raw_materials = []
    materials: List[MaterialSpec] = []
    for pos, raw in enumerate(raw_materials):
        try:
            materials.append(MaterialSpec.model_validate(raw))
        except ValidationError as e:
            logger.warning("Document {} material {} is malformed, skipped: {}", doc_id, pos, e)
    data["materials"] = materials
    try:
        return CatalogEntry.model_validate(data)
    except ValidationError as e:
        logger.warning("Skipping malformed catalog document {}: {}", doc_id, e)
        return None


class FirestoreCatalogStore:
    """Read-only catalog adapter over ``httpx.AsyncClient``."""

    def __init__(
        self,
        project: str = config.FIRESTORE_PROJECT,
        *,
        database: str = config.FIRESTORE_DATABASE,
        collection: str = config.CATALOG_COLLECTION,
        api_key: str | None = config.CATALOG_API_KEY,
        client: httpx.AsyncClient | None = None,
        base_url: str = config.FIRESTORE_BASE_URL,
    ) -> None:
        if not project:
            raise ValueError("A Firestore project id is required (CATALOG_FIRESTORE_PROJECT).")
        self.collection = collection
        self.api_key = api_key
        self._url = f"{base_url}/projects/{project}/databases/{database}/documents:runQuery"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.HTTP_TIMEOUT, connect=config.HTTP_CONNECT_TIMEOUT),
        )

    async def __aenter__(self) -> "FirestoreCatalogStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _run_query(self, where: Dict[str, Any]) -> List[CatalogEntry]:
        body = {
            "structuredQuery": {
                "from": [{"collectionId": self.collection}],
                "where": where,
            }
        }
        params = {"key": self.api_key} if self.api_key else None
        try:
            r = await self._client.post(self._url, json=body, params=params)
        except httpx.HTTPError as e:
            raise StoreError(f"catalog query failed: {e}") from e

        if r.status_code >= 400:
            raise StoreError(
                f"catalog query returned HTTP {r.status_code}",
                status_code=r.status_code,
            )

        entries: List[CatalogEntry] = []
        for row in r.json():
            document = row.get("document")
            if not document:
                continue
            entry = document_to_entry(document)
            if entry is not None:
                entries.append(entry)
        return entries

    async def equality_query(self, field: LookupField, value: str) -> List[CatalogEntry]:
        return await self._run_query(_field_filter(field, "EQUAL", value))

    async def prefix_range_query(self, field: LookupField, prefix: str) -> List[CatalogEntry]:
        where = {
            "compositeFilter": {
                "op": "AND",
                "filters": [
                    _field_filter(field, "GREATER_THAN_OR_EQUAL", prefix),
                    _field_filter(field, "LESS_THAN", prefix + config.PREFIX_RANGE_SENTINEL),
                ],
            }
        }
        return await self._run_query(where)
