"""
Shared constants: extension URLs, code systems, issue codes and the
value sets used by enum-constrained concept mapping.

Centralised here so the Localizer and the mappers agree on every URL
without importing each other.
"""

from __future__ import annotations

# ── Namespaces ─────────────────────────────────────────────────────

NS = "https://fhir-tenancy.github.io/ns/fhir"

EXTENSION_NS = f"{NS}/StructureDefinition/Extension"

CODE_SYSTEMS_URI = f"{NS}/CodeSystem"
"""Base of the tenant-scoped code systems used for enum lookups.

A bare status code from tenant ``acme`` at ``Appointment.status`` is
looked up as ``Coding(system=<CODE_SYSTEMS_URI>/acme/AppointmentStatus)``.
"""

# ── Data authority ─────────────────────────────────────────────────

DATA_AUTHORITY_EXTENSION_URL = f"{EXTENSION_NS}/dataAuthorityIdentifier"
"""Marker attached to ``Reference.type`` once a reference is localized."""

DATA_AUTHORITY_SYSTEM = f"{CODE_SYSTEMS_URI}/DataAuthority"

DATA_AUTHORITY_ID_TYPE_CODE = "DAID"

DATA_AUTHORITY_VALUE = "EHR Data Authority"

# ── Tenant-source provenance extensions ────────────────────────────
#
# One URL per (resource type, field).  The extension value is the
# tenant's original coded value, verbatim.

TENANT_SOURCE_APPOINTMENT_STATUS = f"{EXTENSION_NS}/tenant-sourceAppointmentStatus"
TENANT_SOURCE_CARE_PLAN_CATEGORY = f"{EXTENSION_NS}/tenant-sourceCarePlanCategory"
TENANT_SOURCE_CONDITION_CODE = f"{EXTENSION_NS}/tenant-sourceConditionCode"
TENANT_SOURCE_DOCUMENT_REFERENCE_TYPE = f"{EXTENSION_NS}/tenant-sourceDocumentReferenceType"
TENANT_SOURCE_ENCOUNTER_CLASS = f"{EXTENSION_NS}/tenant-sourceEncounterClass"
TENANT_SOURCE_MEDICATION_CODE = f"{EXTENSION_NS}/tenant-sourceMedicationCode"
TENANT_SOURCE_MEDICATION_ADMINISTRATION_STATUS = (
    f"{EXTENSION_NS}/tenant-sourceMedicationAdministrationStatus"
)
TENANT_SOURCE_OBSERVATION_CODE = f"{EXTENSION_NS}/tenant-sourceObservationCode"
TENANT_SOURCE_OBSERVATION_VALUE = (
    f"{EXTENSION_NS}/tenant-sourceObservationValueCodeableConcept"
)
TENANT_SOURCE_OBSERVATION_COMPONENT_CODE = (
    f"{EXTENSION_NS}/tenant-sourceObservationComponentCode"
)
TENANT_SOURCE_OBSERVATION_COMPONENT_VALUE = (
    f"{EXTENSION_NS}/tenant-sourceObservationComponentValueCodeableConcept"
)
TENANT_SOURCE_PROCEDURE_CODE = f"{EXTENSION_NS}/tenant-sourceProcedureCode"
TENANT_SOURCE_SERVICE_REQUEST_CATEGORY = (
    f"{EXTENSION_NS}/tenant-sourceServiceRequestCategory"
)
TENANT_SOURCE_SERVICE_REQUEST_CODE = f"{EXTENSION_NS}/tenant-sourceServiceRequestCode"
TENANT_SOURCE_TELECOM_SYSTEM = f"{EXTENSION_NS}/tenant-sourceTelecomSystem"
TENANT_SOURCE_TELECOM_USE = f"{EXTENSION_NS}/tenant-sourceTelecomUse"

TENANT_SOURCE_EXTENSION_URLS: dict[str, str] = {
    "Appointment.status": TENANT_SOURCE_APPOINTMENT_STATUS,
    "CarePlan.category": TENANT_SOURCE_CARE_PLAN_CATEGORY,
    "Condition.code": TENANT_SOURCE_CONDITION_CODE,
    "DocumentReference.type": TENANT_SOURCE_DOCUMENT_REFERENCE_TYPE,
    "Encounter.class": TENANT_SOURCE_ENCOUNTER_CLASS,
    "Medication.code": TENANT_SOURCE_MEDICATION_CODE,
    "MedicationAdministration.status": TENANT_SOURCE_MEDICATION_ADMINISTRATION_STATUS,
    "Observation.code": TENANT_SOURCE_OBSERVATION_CODE,
    "Observation.valueCodeableConcept": TENANT_SOURCE_OBSERVATION_VALUE,
    "Observation.component.code": TENANT_SOURCE_OBSERVATION_COMPONENT_CODE,
    "Observation.component.valueCodeableConcept": (
        TENANT_SOURCE_OBSERVATION_COMPONENT_VALUE
    ),
    "Procedure.code": TENANT_SOURCE_PROCEDURE_CODE,
    "ServiceRequest.category": TENANT_SOURCE_SERVICE_REQUEST_CATEGORY,
    "ServiceRequest.code": TENANT_SOURCE_SERVICE_REQUEST_CODE,
}
"""Provenance URL for each resource-level field path that is mapped."""

TENANT_SOURCE_ELEMENT_EXTENSION_URLS: dict[str, str] = {
    "telecom.system": TENANT_SOURCE_TELECOM_SYSTEM,
    "telecom.use": TENANT_SOURCE_TELECOM_USE,
}
"""Provenance URL for element fields, keyed by the path below the resource type."""

KNOWN_EXTENSION_URLS: frozenset[str] = frozenset({
    DATA_AUTHORITY_EXTENSION_URL,
    *TENANT_SOURCE_EXTENSION_URLS.values(),
    *TENANT_SOURCE_ELEMENT_EXTENSION_URLS.values(),
})
"""Extensions written by this package; normalization never drops them."""

# ── Validation issue codes ─────────────────────────────────────────

FAILED_CONCEPT_MAP_LOOKUP = "NOV_CONMAP_LOOKUP"
"""No target was found for a tenant source value."""

CONCEPT_MAP_INVALID_VALUE_SET = "INV_CONMAP_VALUE_SET"
"""A target was found but lies outside the field's required value set."""

# ── Required value sets for enum-constrained fields (FHIR R4) ──────

APPOINTMENT_STATUS_CODES: frozenset[str] = frozenset({
    "proposed", "pending", "booked", "arrived", "fulfilled", "cancelled",
    "noshow", "entered-in-error", "checked-in", "waitlist",
})

MEDICATION_ADMINISTRATION_STATUS_CODES: frozenset[str] = frozenset({
    "in-progress", "not-done", "on-hold", "completed", "entered-in-error",
    "stopped", "unknown",
})

CONTACT_POINT_SYSTEM_CODES: frozenset[str] = frozenset({
    "phone", "fax", "email", "pager", "url", "sms", "other",
})

CONTACT_POINT_USE_CODES: frozenset[str] = frozenset({
    "home", "work", "temp", "old", "mobile",
})
