"""
Normalization of tenant-sourced FHIR resources into a standard form.

Runs before mapping and localization so both see one shape of data:

  - ``Coding.system`` given as an HL7 OID (bare or ``urn:oid:``) is
    rewritten to the code system's canonical URI.
  - ``Identifier.system`` OIDs are rewritten the same way from the
    identifier namespace table.
  - A ``CodeableConcept`` without text takes the display of its
    user-selected coding, or of its only coding.
  - ContactPoints missing a system or a value, and extensions with no
    url or no content, are dropped from the lists holding them.
    Extensions written by this package are always kept.

Like localization, normalization is copy-on-write: a node whose subtree
needs no change is returned as the same object, and ``contained``
resources are never descended into.  Children are normalized before
the node holding them.

Architecture notes:
  - Traversal is generic over the model's dataclasses.
  - Per-type rules live in ``_ELEMENT_NORMALIZERS``, keyed by exact
    class.  A rule returns the (possibly new) node, or ``_REMOVE`` to
    drop it from the tuple it sits in.  A removal outside a tuple keeps
    the node as is.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, TypeVar

from fhir_tenancy._constants import KNOWN_EXTENSION_URLS
from fhir_tenancy.model import CodeableConcept, Coding, ContactPoint, Extension, Identifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

_REMOVE = object()

_OID_PREFIX = "urn:oid:"

CODING_SYSTEM_URIS: dict[str, str] = {
    "2.16.840.1.113883.6.96": "http://snomed.info/sct",
    "2.16.840.1.113883.6.88": "http://www.nlm.nih.gov/research/umls/rxnorm",
    "2.16.840.1.113883.6.1": "http://loinc.org",
    "2.16.840.1.113883.6.8": "http://unitsofmeasure.org",
    "2.16.840.1.113883.3.26.1.2": "http://ncimeta.nci.nih.gov",
    "2.16.840.1.113883.6.12": "http://www.ama-assn.org/go/cpt",
    "2.16.840.1.113883.6.209": "http://hl7.org/fhir/ndfrt",
    "2.16.840.1.113883.4.9": "http://fdasis.nlm.nih.gov",
    "2.16.840.1.113883.6.69": "http://hl7.org/fhir/sid/ndc",
    "2.16.840.1.113883.12.292": "http://hl7.org/fhir/sid/cvx",
    "1.0.3166.1.2.2": "urn:iso:std:iso:3166",
    "2.16.840.1.113883.6.344": "http://hl7.org/fhir/sid/dsm5",
    "2.16.840.1.113883.6.301.5": "http://www.nubc.org/patient-discharge",
    "2.16.840.1.113883.6.256": "http://www.radlex.org",
    "2.16.840.1.113883.6.3": "http://hl7.org/fhir/sid/icd-10",
    "2.16.840.1.113883.6.42": "http://hl7.org/fhir/sid/icd-9-cm",
    "2.16.840.1.113883.6.90": "http://hl7.org/fhir/sid/icd-10-cm",
    "2.16.840.1.113883.2.4.4.31.1": "http://hl7.org/fhir/sid/icpc-1",
    "2.16.840.1.113883.6.139": "http://hl7.org/fhir/sid/icpc-2",
    "2.16.840.1.113883.6.254": "http://hl7.org/fhir/sid/icf-nl",
    "1.3.160": "https://www.gs1.org/gtin",
    "2.16.840.1.113883.6.73": "http://www.whocc.no/atc",
    "2.16.840.1.113883.6.24": "urn:iso:std:iso:11073:10101",
    "1.2.840.10008.2.16.4": "http://dicom.nema.org/resources/ontology/DCM",
    "2.16.840.1.113883.5.1105": "http://hl7.org/fhir/NamingSystem/ca-hc-din",
    "2.16.840.1.113883.6.101": "http://nucc.org/provider-taxonomy",
    "2.16.840.1.113883.6.14": "https://www.cms.gov/Medicare/Coding/HCPCSReleaseCodeSets",
    "2.16.840.1.113883.6.43.1": "http://terminology.hl7.org/CodeSystem/icd-o-3",
}
"""HL7 OIDs of external code systems and their canonical FHIR URIs."""

IDENTIFIER_SYSTEM_URIS: dict[str, str] = {
    "2.16.840.1.113883.4.1": "http://hl7.org/fhir/sid/us-ssn",
    "2.16.840.1.113883.4.6": "http://hl7.org/fhir/sid/us-npi",
    "2.16.840.1.113883.4.7": "http://hl7.org/fhir",
}
"""HL7 OIDs of identifier namespaces and their canonical FHIR URIs."""


# ═══════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════


def normalize(element: T, tenant: str) -> T:
    """Normalize *element* and everything beneath it for *tenant*.

    Args:
        element: Any node of the model, a tuple of nodes, a scalar, or
            ``None``.
        tenant: The tenant mnemonic the data came from.

    Returns:
        The normalized node, or *element* itself when nothing in its
        subtree changed.

    Raises:
        ValueError: If *tenant* is empty.
    """
    if not tenant:
        raise ValueError("tenant mnemonic must be a non-empty string")
    normalized = _normalize(element, tenant)
    return element if normalized is _REMOVE else normalized


def normalize_coding_system(system: str | None) -> str | None:
    """Canonical URI for a code system OID; other values are returned as is."""
    return _lookup_system(CODING_SYSTEM_URIS, system)


def normalize_identifier_system(system: str | None) -> str | None:
    """Canonical URI for an identifier namespace OID; others are returned as is."""
    return _lookup_system(IDENTIFIER_SYSTEM_URIS, system)


def _lookup_system(table: dict[str, str], system: str | None) -> str | None:
    if system is None:
        return None
    return table.get(system) or table.get(system.removeprefix(_OID_PREFIX)) or system


# ═══════════════════════════════════════════════════════════════════
# TRAVERSAL
# ═══════════════════════════════════════════════════════════════════


def _normalize(value: Any, tenant: str) -> Any:
    if isinstance(value, tuple):
        return _normalize_tuple(value, tenant)
    if not dataclasses.is_dataclass(value) or isinstance(value, type):
        return value

    node = _normalize_fields(value, tenant)
    rule = _ELEMENT_NORMALIZERS.get(type(node))
    if rule is None:
        return node
    return rule(node, tenant)


def _normalize_tuple(values: tuple[Any, ...], tenant: str) -> tuple[Any, ...]:
    normalized = [_normalize(item, tenant) for item in values]
    if all(new is old for new, old in zip(normalized, values)):
        return values
    return tuple(item for item in normalized if item is not _REMOVE)


def _normalize_fields(node: Any, tenant: str) -> Any:
    changes: dict[str, Any] = {}
    for field in dataclasses.fields(node):
        if field.name == "contained":
            continue
        current = getattr(node, field.name)
        normalized = _normalize(current, tenant)
        if normalized is _REMOVE:
            continue
        if normalized is not current:
            changes[field.name] = normalized
    if not changes:
        return node
    return dataclasses.replace(node, **changes)


# ── Element rules ──────────────────────────────────────────────────


def _normalize_coding(coding: Coding, tenant: str) -> Coding:
    system = normalize_coding_system(coding.system)
    if system == coding.system:
        return coding
    return dataclasses.replace(coding, system=system)


def _normalize_identifier(identifier: Identifier, tenant: str) -> Identifier:
    system = normalize_identifier_system(identifier.system)
    if system == identifier.system:
        return identifier
    return dataclasses.replace(identifier, system=system)


def _normalize_codeable_concept(
    concept: CodeableConcept, tenant: str,
) -> CodeableConcept:
    if concept.text:
        return concept

    selected = [coding for coding in concept.coding if coding.user_selected]
    if len(selected) != 1:
        selected = list(concept.coding)
    if len(selected) != 1 or not selected[0].display:
        return concept
    return dataclasses.replace(concept, text=selected[0].display)


def _normalize_contact_point(contact_point: ContactPoint, tenant: str) -> Any:
    if contact_point.system is None or contact_point.value is None:
        return _REMOVE
    return contact_point


def _normalize_extension(extension: Extension, tenant: str) -> Any:
    if extension.url in KNOWN_EXTENSION_URLS:
        return extension
    if extension.url and (extension.value is not None or extension.extension):
        return extension
    logger.info("Extension filtered out for tenant %s: %s", tenant, extension)
    return _REMOVE


_ELEMENT_NORMALIZERS: dict[type, Callable[[Any, str], Any]] = {
    Coding: _normalize_coding,
    CodeableConcept: _normalize_codeable_concept,
    ContactPoint: _normalize_contact_point,
    Extension: _normalize_extension,
    Identifier: _normalize_identifier,
}
