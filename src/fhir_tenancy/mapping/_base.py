"""
Shared machinery for resource and element mappers.

A mapper never fails on a terminology gap.  Each lookup that comes back
empty records one :class:`~fhir_tenancy.validation.ValidationIssue` and
leaves the field as authored, so one pass over a resource reports every
gap in it.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, Any, Optional, Protocol, Sequence

from fhir_tenancy._constants import (
    CONCEPT_MAP_INVALID_VALUE_SET,
    FAILED_CONCEPT_MAP_LOOKUP,
)
from fhir_tenancy.mapping._registry import (
    ConceptMapCodeableConcept,
    ConceptMapCoding,
    ConceptMapMetadata,
    ConceptMapRegistry,
    code_system_uri,
    to_tenant_coding,
)
from fhir_tenancy.model import CodeableConcept, Extension, Resource
from fhir_tenancy.validation import (
    Validation,
    ValidationIssue,
    ValidationIssueSeverity,
)

logger = logging.getLogger(__name__)


@dataclass
class MapResponse:
    """Result of mapping one resource.

    ``mapped_resource`` is the input object itself when nothing changed.
    """

    mapped_resource: Resource
    validation: Validation


class ResourceMapper(Protocol):
    supported_resource: type

    def map(
        self,
        resource: Any,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        ...


class ElementMapper(Protocol):
    supported_element: type

    def map(
        self,
        element: Any,
        resource: Resource,
        tenant: str,
        location: str,
        validation: Validation,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> Any:
        """Return the mapped element, or *element* itself if nothing changed."""
        ...


# ── Issues ─────────────────────────────────────────────────────────


def failed_concept_map_lookup(
    source_value: str,
    field_path: str,
    tenant: str,
    location: str,
    metadata: Sequence[ConceptMapMetadata] = (),
) -> ValidationIssue:
    return ValidationIssue(
        severity=ValidationIssueSeverity.ERROR,
        code=FAILED_CONCEPT_MAP_LOOKUP,
        description=(
            f"Tenant source value '{source_value}' has no target defined in "
            f"any {field_path} concept map for tenant '{tenant}'"
        ),
        location=location,
        metadata=tuple(metadata),
    )


def concept_map_invalid_value_set(
    concept_map_uri: str,
    source_value: str,
    target_value: str | None,
    location: str,
    metadata: Sequence[ConceptMapMetadata] = (),
) -> ValidationIssue:
    return ValidationIssue(
        severity=ValidationIssueSeverity.ERROR,
        code=CONCEPT_MAP_INVALID_VALUE_SET,
        description=(
            f"{concept_map_uri} mapped '{source_value}' to '{target_value}' "
            f"which is outside of required value set"
        ),
        location=location,
        metadata=tuple(metadata),
    )


# ── Paths ──────────────────────────────────────────────────────────

_SNAKE_PART = re.compile(r"_([a-z])")


def to_fhir_name(attribute: str) -> str:
    """``"value_codeable_concept"`` → ``"valueCodeableConcept"``; ``"class_"`` → ``"class"``."""
    return _SNAKE_PART.sub(lambda m: m.group(1).upper(), attribute.rstrip("_"))


# ── Base mapper ────────────────────────────────────────────────────


class BaseMapper:
    """Lookup helpers that report every failure into a :class:`Validation`.

    Args:
        registry: The concept-map registry all lookups go through.
    """

    def __init__(self, registry: ConceptMapRegistry) -> None:
        self.registry = registry

    def _get_concept_mapping(
        self,
        codeable_concept: CodeableConcept,
        field_path: str,
        location: str,
        resource: Resource,
        tenant: str,
        validation: Validation,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> Optional[ConceptMapCodeableConcept]:
        """Look up *codeable_concept*; a miss records ``NOV_CONMAP_LOOKUP``."""
        mapped = self.registry.get_concept_mapping(
            tenant, field_path, codeable_concept, resource, force_cache_reload_ts,
        )
        source_value = ", ".join(
            coding.code for coding in codeable_concept.coding
            if coding.code is not None
        )
        if not validation.check_not_none(
            mapped,
            failed_concept_map_lookup(source_value, field_path, tenant, location),
        ):
            logger.debug(
                "Concept map miss for %s at %s (tenant %s)",
                source_value, location, tenant,
            )
        return mapped

    def _get_concept_mapping_for_enum(
        self,
        value: str,
        field_path: str,
        location: str,
        target_values: AbstractSet[str],
        extension_url: str,
        resource: Resource,
        tenant: str,
        validation: Validation,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> Optional[ConceptMapCoding]:
        """Look up a bare code whose target must lie in *target_values*.

        A miss records ``NOV_CONMAP_LOOKUP``.  A target outside
        *target_values* records ``INV_CONMAP_VALUE_SET`` and is treated
        as a miss.
        """
        mapped = self.registry.get_concept_mapping_for_enum(
            tenant,
            field_path,
            to_tenant_coding(tenant, field_path, value),
            target_values,
            extension_url,
            resource,
            force_cache_reload_ts,
        )
        if not validation.check_not_none(
            mapped, failed_concept_map_lookup(value, field_path, tenant, location),
        ):
            logger.debug(
                "Concept map miss for %s at %s (tenant %s)", value, location, tenant,
            )
            return None

        target_value = mapped.coding.code
        if target_value not in target_values:
            logger.debug(
                "Concept map target %s for %s at %s is outside the value set",
                target_value, value, location,
            )
            validation.add_issue(
                concept_map_invalid_value_set(
                    code_system_uri(tenant, field_path),
                    value,
                    target_value,
                    location,
                    mapped.metadata,
                )
            )
            return None
        return mapped


def apply_mapping(
    node: Any,
    changes: dict[str, Any],
    new_extensions: Sequence[Extension],
) -> Any:
    """Return *node* with *changes* and *new_extensions* appended.

    *node* itself is returned when there is nothing to apply.
    """
    if new_extensions:
        changes = {**changes, "extension": node.extension + tuple(new_extensions)}
    if not changes:
        return node
    return dataclasses.replace(node, **changes)


def verbatim_provenance(url: str, value: Any) -> tuple[Extension, ...]:
    """Provenance extension carrying *value* as sent; empty when *value* is ``None``."""
    if value is None:
        return ()
    return (Extension(url=url, value=value),)
