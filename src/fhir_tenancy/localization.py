"""
Tenant localization of FHIR resources.

Rewrites every locally-scoped identifier in a resource tree into a
tenant-namespaced form:

  - ``Id("123")``                     → ``Id("<tenant>-123")``
  - ``Reference("Patient/123")``      → ``Reference("Patient/<tenant>-123",
                                        type=Uri("Patient", <data authority>))``

Logical (identifier-based), contained (``#id``) and display-only
references are left alone, and ``contained`` resources are never
descended into: their references are scoped to the container, not to
the tenant.

Localization is copy-on-write.  A node whose subtree holds nothing to
localize is returned as the *same object*; callers rely on ``is`` to
detect that nothing changed.  Otherwise a new node is built with
:func:`dataclasses.replace`, sharing every unchanged child.

Localization is not idempotent: localizing an already-localized node
for the same tenant prefixes it again.  Localize a resource once.

Architecture notes:
  - Dispatch is a table keyed by exact node class (``_LOCALIZERS``).
  - Composite kinds share one factory, ``_make_composite_localizer``,
    parameterised by the names of the fields that can hold localizable
    content.  ``Id`` and ``Reference`` have dedicated handlers.
  - Any object that is neither a scalar, a tuple, nor a registered node
    kind raises ``TypeError``.
"""

from __future__ import annotations

import dataclasses
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, TypeVar

from fhir_tenancy._constants import (
    DATA_AUTHORITY_EXTENSION_URL,
    DATA_AUTHORITY_ID_TYPE_CODE,
    DATA_AUTHORITY_SYSTEM,
    DATA_AUTHORITY_VALUE,
)
from fhir_tenancy.model import (
    Address,
    Annotation,
    Appointment,
    Attachment,
    AvailableTime,
    CarePlan,
    Code,
    CodeableConcept,
    Coding,
    Condition,
    ConditionEvidence,
    ConditionStage,
    ContactPoint,
    DocumentReference,
    DocumentReferenceContent,
    Dosage,
    DoseAndRate,
    Duration,
    Encounter,
    Extension,
    HumanName,
    Id,
    Identifier,
    Location,
    Medication,
    MedicationAdministration,
    MedicationRequest,
    Meta,
    Narrative,
    NotAvailable,
    Observation,
    ObservationComponent,
    ObservationReferenceRange,
    Participant,
    Patient,
    PatientCommunication,
    PatientContact,
    PatientLink,
    Period,
    Practitioner,
    PractitionerRole,
    Procedure,
    Qualification,
    Quantity,
    Range,
    Ratio,
    Reference,
    ServiceRequest,
    Timing,
    TimingRepeat,
    Uri,
)

T = TypeVar("T")

# ── Data authority marker ──────────────────────────────────────────

DATA_AUTHORITY_IDENTIFIER = Identifier(
    type=CodeableConcept(
        coding=(
            Coding(
                system=DATA_AUTHORITY_SYSTEM,
                code=DATA_AUTHORITY_ID_TYPE_CODE,
                display="Data Authority Identifier",
            ),
        ),
        text="Data Authority Identifier",
    ),
    system=DATA_AUTHORITY_SYSTEM,
    value=DATA_AUTHORITY_VALUE,
)

DATA_AUTHORITY_EXTENSIONS: tuple[Extension, ...] = (
    Extension(url=DATA_AUTHORITY_EXTENSION_URL, value=DATA_AUTHORITY_IDENTIFIER),
)
"""Extension list placed on ``Reference.type`` by reference localization."""

# ``[base/]Type/id[/_history/version]``.  The base URL is dropped on
# rewrite; the history suffix is kept.
_LITERAL_REFERENCE = re.compile(
    r"(?:https?://(?:[A-Za-z0-9\-\\.:%$]*/)+)?"
    r"(?P<type>[A-Z][A-Za-z]+)/"
    r"(?P<id>[A-Za-z0-9\-.]{1,64})"
    r"(?P<history>/_history/[A-Za-z0-9\-.]{1,64})?"
)

_SCALAR_TYPES = (str, bool, int, float, Decimal, date, datetime, time, bytes)


# ═══════════════════════════════════════════════════════════════════
# PUBLIC API
# ═══════════════════════════════════════════════════════════════════


def localize(element: T, tenant: str) -> T:
    """Localize *element* and everything beneath it for *tenant*.

    Args:
        element: Any node of the model (resource, data type, back-bone
            element), a tuple of nodes, a scalar, or ``None``.
        tenant: The tenant mnemonic used as the id prefix.

    Returns:
        The localized node, or *element* itself when nothing in its
        subtree needed localizing.

    Raises:
        ValueError: If *tenant* is empty.
        TypeError: If *element* (or anything beneath it) is not a node
            kind this module knows how to decompose.
    """
    if not tenant:
        raise ValueError("tenant mnemonic must be a non-empty string")
    return _localize(element, tenant)


def localize_id(id_: Id, tenant: str) -> Id:
    """Prefix the id value with ``<tenant>-``.  ``None`` values are kept."""
    if id_.value is None:
        return id_
    return dataclasses.replace(id_, value=f"{tenant}-{id_.value}")


def localize_reference(reference: Reference, tenant: str) -> Reference:
    """Localize a reference's children, then its literal reference string.

    Only literal references of the form ``Type/id`` are rewritten.  The
    rewritten reference gets ``type`` set to the resource type carrying
    :data:`DATA_AUTHORITY_EXTENSIONS`.
    """
    localized = _localize_reference_children(reference, tenant)
    literal = localized.reference
    if literal is None:
        return localized

    match = _LITERAL_REFERENCE.fullmatch(literal)
    if match is None:
        return localized

    resource_type = match["type"]
    history = match["history"] or ""
    return dataclasses.replace(
        localized,
        reference=f"{resource_type}/{tenant}-{match['id']}{history}",
        type=Uri(resource_type, extension=DATA_AUTHORITY_EXTENSIONS),
    )


# ═══════════════════════════════════════════════════════════════════
# TRAVERSAL
# ═══════════════════════════════════════════════════════════════════


def _localize(value: Any, tenant: str) -> Any:
    if value is None or isinstance(value, _SCALAR_TYPES):
        return value
    if isinstance(value, tuple):
        return _localize_tuple(value, tenant)

    handler = _LOCALIZERS.get(type(value))
    if handler is None:
        raise TypeError(
            f"Cannot localize object of type '{type(value).__name__}': "
            f"not a supported FHIR node"
        )
    return handler(value, tenant)


def _localize_tuple(values: tuple[Any, ...], tenant: str) -> tuple[Any, ...]:
    localized = tuple(_localize(item, tenant) for item in values)
    if all(new is old for new, old in zip(localized, values)):
        return values
    return localized


def _make_composite_localizer(
    *field_names: str,
) -> Callable[[Any, str], Any]:
    """Factory for localizers of composite node kinds.

    The returned handler localizes each named field and rebuilds the
    node only when at least one of them came back as a different object.
    Fields not named are copied across untouched.
    """

    def localizer(node: Any, tenant: str) -> Any:
        changes: dict[str, Any] = {}
        for name in field_names:
            current = getattr(node, name)
            localized = _localize(current, tenant)
            if localized is not current:
                changes[name] = localized
        if not changes:
            return node
        return dataclasses.replace(node, **changes)

    return localizer


_localize_reference_children = _make_composite_localizer(
    "extension", "identifier", "type",
)


# ── Field tables ───────────────────────────────────────────────────
#
# ``contained`` is deliberately absent from every resource entry.

_EXTENSIBLE = ("extension",)
_MODIFIABLE = ("extension", "modifier_extension")
_RESOURCE = (
    "id", "meta", "language", "text", "extension", "modifier_extension",
    "identifier",
)

_LOCALIZERS: dict[type, Callable[[Any, str], Any]] = {
    # Primitive elements
    Id: localize_id,
    Code: _make_composite_localizer(*_EXTENSIBLE),
    Uri: _make_composite_localizer(*_EXTENSIBLE),
    # Data types
    Reference: localize_reference,
    Extension: _make_composite_localizer(*_EXTENSIBLE, "value"),
    Coding: _make_composite_localizer(*_EXTENSIBLE),
    CodeableConcept: _make_composite_localizer(*_EXTENSIBLE, "coding"),
    Period: _make_composite_localizer(*_EXTENSIBLE),
    Quantity: _make_composite_localizer(*_EXTENSIBLE, "comparator"),
    Duration: _make_composite_localizer(*_EXTENSIBLE, "comparator"),
    Ratio: _make_composite_localizer(*_EXTENSIBLE, "numerator", "denominator"),
    Range: _make_composite_localizer(*_EXTENSIBLE, "low", "high"),
    TimingRepeat: _make_composite_localizer(
        *_EXTENSIBLE, "bounds", "duration_unit", "period_unit",
        "day_of_week", "when",
    ),
    Timing: _make_composite_localizer(*_MODIFIABLE, "repeat", "code"),
    DoseAndRate: _make_composite_localizer(*_EXTENSIBLE, "type", "dose", "rate"),
    Dosage: _make_composite_localizer(
        *_MODIFIABLE, "additional_instruction", "timing", "as_needed",
        "site", "route", "method", "dose_and_rate", "max_dose_per_period",
        "max_dose_per_administration", "max_dose_per_lifetime",
    ),
    HumanName: _make_composite_localizer(*_EXTENSIBLE, "use", "period"),
    Identifier: _make_composite_localizer(
        *_EXTENSIBLE, "use", "type", "period", "assigner",
    ),
    ContactPoint: _make_composite_localizer(
        *_EXTENSIBLE, "system", "use", "period",
    ),
    Address: _make_composite_localizer(*_EXTENSIBLE, "use", "type", "period"),
    Attachment: _make_composite_localizer(
        *_EXTENSIBLE, "content_type", "language",
    ),
    Narrative: _make_composite_localizer(*_EXTENSIBLE, "status"),
    Meta: _make_composite_localizer(*_EXTENSIBLE, "security", "tag"),
    Annotation: _make_composite_localizer(*_EXTENSIBLE, "author"),
    # Back-bone elements
    Qualification: _make_composite_localizer(
        *_MODIFIABLE, "identifier", "code", "period", "issuer",
    ),
    Participant: _make_composite_localizer(
        *_MODIFIABLE, "type", "actor", "required", "status", "period",
    ),
    PatientCommunication: _make_composite_localizer(*_MODIFIABLE, "language"),
    PatientContact: _make_composite_localizer(
        *_MODIFIABLE, "relationship", "name", "telecom", "address", "gender",
        "organization", "period",
    ),
    PatientLink: _make_composite_localizer(*_MODIFIABLE, "other", "type"),
    NotAvailable: _make_composite_localizer(*_MODIFIABLE, "during"),
    AvailableTime: _make_composite_localizer(*_MODIFIABLE, "days_of_week"),
    ConditionStage: _make_composite_localizer(
        *_MODIFIABLE, "summary", "assessment", "type",
    ),
    ConditionEvidence: _make_composite_localizer(*_MODIFIABLE, "code", "detail"),
    ObservationReferenceRange: _make_composite_localizer(
        *_MODIFIABLE, "low", "high", "type", "applies_to", "age",
    ),
    ObservationComponent: _make_composite_localizer(
        *_MODIFIABLE, "code", "value", "data_absent_reason", "interpretation",
        "reference_range",
    ),
    DocumentReferenceContent: _make_composite_localizer(
        *_MODIFIABLE, "attachment", "format",
    ),
    # Resources
    Patient: _make_composite_localizer(
        *_RESOURCE, "name", "telecom", "gender", "address", "marital_status",
        "photo", "contact", "communication", "general_practitioner",
        "managing_organization", "link",
    ),
    Practitioner: _make_composite_localizer(
        *_RESOURCE, "name", "telecom", "address", "gender", "photo",
        "qualification", "communication",
    ),
    PractitionerRole: _make_composite_localizer(
        *_RESOURCE, "period", "practitioner", "organization", "code",
        "specialty", "location", "healthcare_service", "telecom",
        "available_time", "not_available", "endpoint",
    ),
    Location: _make_composite_localizer(
        *_RESOURCE, "status", "operational_status", "mode", "type", "telecom",
        "address", "physical_type", "managing_organization", "part_of",
        "endpoint",
    ),
    Observation: _make_composite_localizer(
        *_RESOURCE, "based_on", "part_of", "status", "category", "code",
        "subject", "focus", "encounter", "effective", "performer", "value",
        "data_absent_reason", "interpretation", "note", "body_site", "method",
        "specimen", "device", "reference_range", "has_member", "derived_from",
        "component",
    ),
    Condition: _make_composite_localizer(
        *_RESOURCE, "clinical_status", "verification_status", "category",
        "severity", "code", "body_site", "subject", "encounter", "onset",
        "abatement", "recorder", "asserter", "stage", "evidence", "note",
    ),
    CarePlan: _make_composite_localizer(
        *_RESOURCE, "based_on", "replaces", "part_of", "status", "intent",
        "category", "subject", "encounter", "period", "author", "contributor",
        "care_team", "addresses", "supporting_info", "goal", "note",
    ),
    Appointment: _make_composite_localizer(
        *_RESOURCE, "status", "cancelation_reason", "service_category",
        "service_type", "specialty", "appointment_type", "reason_code",
        "reason_reference", "supporting_information", "slot", "based_on",
        "participant", "requested_period",
    ),
    DocumentReference: _make_composite_localizer(
        *_RESOURCE, "master_identifier", "status", "doc_status", "type",
        "category", "subject", "author", "authenticator", "custodian",
        "security_label", "content",
    ),
    Encounter: _make_composite_localizer(
        *_RESOURCE, "status", "class_", "type", "service_type", "priority",
        "subject", "episode_of_care", "based_on", "appointment", "period",
        "length", "reason_code", "reason_reference", "service_provider",
        "part_of",
    ),
    Medication: _make_composite_localizer(
        *_RESOURCE, "code", "status", "manufacturer", "form", "amount",
    ),
    MedicationAdministration: _make_composite_localizer(
        *_RESOURCE, "part_of", "status", "status_reason", "category",
        "medication", "subject", "context", "supporting_information",
        "effective", "reason_code", "reason_reference", "request", "device",
        "note",
    ),
    MedicationRequest: _make_composite_localizer(
        *_RESOURCE, "status", "intent", "category", "priority", "medication",
        "subject", "encounter", "requester", "reason_code",
        "reason_reference", "note", "dosage_instruction",
    ),
    Procedure: _make_composite_localizer(
        *_RESOURCE, "based_on", "part_of", "status", "status_reason",
        "category", "code", "subject", "encounter", "performed", "recorder",
        "asserter", "reason_code", "reason_reference", "body_site", "note",
    ),
    ServiceRequest: _make_composite_localizer(
        *_RESOURCE, "based_on", "replaces", "requisition", "status", "intent",
        "category", "priority", "code", "quantity", "subject", "encounter",
        "occurrence", "requester", "reason_code", "reason_reference", "note",
    ),
}
