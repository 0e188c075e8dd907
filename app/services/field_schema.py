"""Static field schema of the repository connector.

Each field carries its extractor, so declaring a field and projecting an
upstream node onto it happen in one place.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

from ..models.connectorRequest import FieldConcept, FieldSchema, FieldType

logger = logging.getLogger(__name__)

Extractor = Callable[[Dict[str, Any]], Any]


@dataclass(frozen=True)
class FieldSpec:
    id: str
    type: FieldType
    concept: FieldConcept
    extract: Extractor

    def to_schema(self) -> FieldSchema:
        return FieldSchema(name=self.id, data_type=self.type, concept=self.concept)


def _attr(name: str) -> Extractor:
    return lambda node: node.get(name)


FIELDS: List[FieldSpec] = [
    FieldSpec("name", FieldType.TEXT, FieldConcept.DIMENSION, _attr("name")),
    FieldSpec("description", FieldType.TEXT, FieldConcept.METRIC, _attr("description")),
    FieldSpec("url", FieldType.URL, FieldConcept.METRIC, _attr("url")),
    FieldSpec("createdAt", FieldType.TEXT, FieldConcept.METRIC, _attr("createdAt")),
    FieldSpec("updatedAt", FieldType.TEXT, FieldConcept.METRIC, _attr("updatedAt")),
    FieldSpec("stargazerCount", FieldType.NUMBER, FieldConcept.METRIC, _attr("stargazerCount")),
]

FIELDS_BY_ID: Dict[str, FieldSpec] = {field.id: field for field in FIELDS}

# Value emitted for identifiers outside the declared schema
UNKNOWN_FIELD_VALUE = ""


def get_fields() -> List[FieldSchema]:
    """Full schema, in declaration order"""
    return [field.to_schema() for field in FIELDS]


def fields_for_ids(field_ids: Sequence[str]) -> List[FieldSchema]:
    """
    Sub-schema for the requested identifiers

    Args:
        field_ids: Requested field identifiers, in output order

    Returns:
        Declared fields among field_ids, in the caller's order. Unknown
        identifiers are left out.
    """
    unknown = [field_id for field_id in field_ids if field_id not in FIELDS_BY_ID]
    if unknown:
        logger.warning(f"Ignoring unknown field ids in schema: {unknown}")

    return [FIELDS_BY_ID[field_id].to_schema() for field_id in field_ids if field_id in FIELDS_BY_ID]


def project_node(node: Dict[str, Any], field_ids: Sequence[str]) -> List[Any]:
    """Values of one upstream node in the order of field_ids"""
    values = []
    for field_id in field_ids:
        field = FIELDS_BY_ID.get(field_id)
        values.append(field.extract(node) if field else UNKNOWN_FIELD_VALUE)
    return values
