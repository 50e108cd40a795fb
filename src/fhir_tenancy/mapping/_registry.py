"""
Concept-map registry contract and an in-memory reference implementation.

The mappers never resolve terminology themselves: every lookup goes
through a :class:`ConceptMapRegistry`.  Production deployments back the
protocol with their normalization service (and own its caching, retry
and timeout policy); :class:`InMemoryConceptMapRegistry` is a
dictionary-backed implementation for tests and local tooling.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, Optional, Protocol, runtime_checkable

from fhir_tenancy._constants import (
    CODE_SYSTEMS_URI,
    TENANT_SOURCE_ELEMENT_EXTENSION_URLS,
    TENANT_SOURCE_EXTENSION_URLS,
)
from fhir_tenancy.model import CodeableConcept, Coding, Extension, Resource

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# RESULT TYPES
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ConceptMapMetadata:
    """Identifies the registry entry a mapping came from."""

    registry_entry_type: str
    concept_map_name: str
    concept_map_uuid: str
    version: str


@dataclass(frozen=True)
class ConceptMapCodeableConcept:
    """A successful CodeableConcept lookup.

    Attributes:
        codeable_concept: The canonical target value.
        extension: Provenance extension carrying the source value verbatim.
        metadata: Registry entries that produced the target.
    """

    codeable_concept: CodeableConcept
    extension: Extension
    metadata: tuple[ConceptMapMetadata, ...] = ()


@dataclass(frozen=True)
class ConceptMapCoding:
    """A successful enum-constrained lookup; see :class:`ConceptMapCodeableConcept`."""

    coding: Coding
    extension: Extension
    metadata: tuple[ConceptMapMetadata, ...] = ()


# ═══════════════════════════════════════════════════════════════════
# PROTOCOL
# ═══════════════════════════════════════════════════════════════════


@runtime_checkable
class ConceptMapRegistry(Protocol):
    """Resolves tenant source values to canonical targets.

    Both methods return ``None`` when no mapping exists.  The owning
    resource is passed so implementations can evaluate ``dependsOn``
    conditions; ``force_cache_reload_ts`` asks the implementation to
    refresh any cache older than the given instant.
    """

    def get_concept_mapping(
        self,
        tenant: str,
        field_path: str,
        codeable_concept: CodeableConcept,
        resource: Resource,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> Optional[ConceptMapCodeableConcept]:
        ...

    def get_concept_mapping_for_enum(
        self,
        tenant: str,
        field_path: str,
        coding: Coding,
        target_values: AbstractSet[str],
        extension_url: str,
        resource: Resource,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> Optional[ConceptMapCoding]:
        """Look up a bare status-like code.

        *target_values* is the set of codes the field accepts.  The
        provenance extension returned must use *extension_url* and carry
        *coding* as its value.
        """
        ...


# ═══════════════════════════════════════════════════════════════════
# TENANT CODE SYSTEMS
# ═══════════════════════════════════════════════════════════════════


def to_uri_name(field_path: str) -> str:
    """``"Patient.telecom.use"`` → ``"PatientTelecomUse"``."""
    return "".join(
        part[0].upper() + part[1:]
        for part in field_path.split(".")
        if len(part) > 1
    )


def code_system_uri(tenant: str, field_path: str) -> str:
    """Tenant-scoped code system for bare codes found at *field_path*."""
    return f"{CODE_SYSTEMS_URI}/{tenant}/{to_uri_name(field_path)}"


def to_tenant_coding(tenant: str, field_path: str, value: str) -> Coding:
    """Wrap a bare code in a Coding using the tenant's code system."""
    return Coding(system=code_system_uri(tenant, field_path), code=value)


def tenant_source_extension_url(field_path: str) -> str:
    """Provenance extension URL for values mapped at *field_path*.

    Element paths (``Patient.telecom.use``) resolve on the part below the
    resource type, so every resource holding the element shares one URL.

    Raises:
        KeyError: If no provenance extension is defined for *field_path*.
    """
    url = TENANT_SOURCE_EXTENSION_URLS.get(field_path)
    if url is None:
        _, _, element_path = field_path.partition(".")
        url = TENANT_SOURCE_ELEMENT_EXTENSION_URLS.get(element_path)
    if url is None:
        raise KeyError(f"No tenant-source extension defined for {field_path}")
    return url


# ═══════════════════════════════════════════════════════════════════
# REFERENCE IMPLEMENTATION: InMemoryConceptMapRegistry
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class _Entry:
    target: Coding
    extension_url: str
    metadata: ConceptMapMetadata


class InMemoryConceptMapRegistry:
    """Dictionary-backed :class:`ConceptMapRegistry`.

    Entries are keyed by ``(tenant, field_path, source system, source
    code)``.  A CodeableConcept source matches on the first of its
    codings that has an entry.  Enum lookups return a source code that
    is already a member of the target set unchanged.

    Example::

        registry = InMemoryConceptMapRegistry()
        registry.add_mapping(
            "acme", "Procedure.code",
            Coding(system="urn:acme:proc", code="X1"),
            Coding(system="http://snomed.info/sct", code="80146002"),
        )

    The provenance URL defaults to the one defined for the field path;
    pass *extension_url* for paths outside that table.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str, str | None, str | None], _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add_mapping(
        self,
        tenant: str,
        field_path: str,
        source: Coding,
        target: Coding,
        *,
        extension_url: Optional[str] = None,
        metadata: Optional[ConceptMapMetadata] = None,
    ) -> None:
        """Register *source* → *target* for *tenant* at *field_path*.

        *extension_url* is the provenance URL used for CodeableConcept
        lookups; enum lookups use the URL supplied by the caller.

        Raises:
            ValueError: If *tenant* is empty, *source* has no code, or no
                provenance URL is given or defined for *field_path*.
        """
        if not tenant:
            raise ValueError("tenant mnemonic must be a non-empty string")
        if source.code is None:
            raise ValueError("source coding must have a code")
        if extension_url is None:
            try:
                extension_url = tenant_source_extension_url(field_path)
            except KeyError:
                raise ValueError(
                    f"extension_url is required for {field_path}: "
                    f"no tenant-source extension is defined for it"
                ) from None
        if metadata is None:
            metadata = _default_metadata(tenant, field_path)
        key = (tenant, field_path, source.system, source.code)
        self._entries[key] = _Entry(target, extension_url, metadata)

    def get_concept_mapping(
        self,
        tenant: str,
        field_path: str,
        codeable_concept: CodeableConcept,
        resource: Resource,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> Optional[ConceptMapCodeableConcept]:
        for coding in codeable_concept.coding:
            entry = self._entries.get((tenant, field_path, coding.system, coding.code))
            if entry is None:
                continue
            target = CodeableConcept(coding=(entry.target,), text=entry.target.display)
            return ConceptMapCodeableConcept(
                codeable_concept=target,
                extension=Extension(url=entry.extension_url, value=codeable_concept),
                metadata=(entry.metadata,),
            )

        logger.debug(
            "No concept map entry for %s in tenant %s", field_path, tenant,
        )
        return None

    def get_concept_mapping_for_enum(
        self,
        tenant: str,
        field_path: str,
        coding: Coding,
        target_values: AbstractSet[str],
        extension_url: str,
        resource: Resource,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> Optional[ConceptMapCoding]:
        provenance = Extension(url=extension_url, value=coding)
        if coding.code in target_values:
            return ConceptMapCoding(coding=coding, extension=provenance)

        entry = self._entries.get((tenant, field_path, coding.system, coding.code))
        if entry is None:
            logger.debug(
                "No enum concept map entry for %s in tenant %s", field_path, tenant,
            )
            return None
        return ConceptMapCoding(
            coding=entry.target, extension=provenance, metadata=(entry.metadata,),
        )


def _default_metadata(tenant: str, field_path: str) -> ConceptMapMetadata:
    name = f"{tenant}-{to_uri_name(field_path)}"
    return ConceptMapMetadata(
        registry_entry_type="concept-map",
        concept_map_name=name,
        concept_map_uuid=str(uuid.uuid5(uuid.NAMESPACE_URL, code_system_uri(tenant, field_path))),
        version="1",
    )
