"""
Node model for tenant-sourced FHIR R4 resources.

The closed set of node kinds the Localizer and the mappers operate on.
All nodes are frozen dataclasses; repeating elements are tuples, so a
node is never mutated once built.  Use :func:`dataclasses.replace` to
derive a changed copy.
"""

from fhir_tenancy.model._primitives import (
    Code,
    Id,
    Uri,
)
from fhir_tenancy.model._datatypes import (
    Address,
    Annotation,
    Attachment,
    CodeableConcept,
    Coding,
    ContactPoint,
    Dosage,
    DoseAndRate,
    Duration,
    Extension,
    HumanName,
    Identifier,
    Meta,
    Narrative,
    Period,
    Quantity,
    Range,
    Ratio,
    Reference,
    SimpleQuantity,
    Timing,
    TimingRepeat,
)
from fhir_tenancy.model._resources import (
    Appointment,
    AvailableTime,
    CarePlan,
    Condition,
    ConditionEvidence,
    ConditionStage,
    DocumentReference,
    DocumentReferenceContent,
    Encounter,
    Location,
    Medication,
    MedicationAdministration,
    MedicationRequest,
    NotAvailable,
    Observation,
    ObservationComponent,
    ObservationReferenceRange,
    Participant,
    Patient,
    PatientCommunication,
    PatientContact,
    PatientLink,
    Practitioner,
    PractitionerRole,
    Procedure,
    Qualification,
    Resource,
    ServiceRequest,
)

__all__ = [
    # Primitive elements
    "Code",
    "Id",
    "Uri",
    # Data types
    "Address",
    "Annotation",
    "Attachment",
    "CodeableConcept",
    "Coding",
    "ContactPoint",
    "Dosage",
    "DoseAndRate",
    "Duration",
    "Extension",
    "HumanName",
    "Identifier",
    "Meta",
    "Narrative",
    "Period",
    "Quantity",
    "Range",
    "Ratio",
    "Reference",
    "SimpleQuantity",
    "Timing",
    "TimingRepeat",
    # Back-bone elements
    "AvailableTime",
    "ConditionEvidence",
    "ConditionStage",
    "DocumentReferenceContent",
    "NotAvailable",
    "ObservationComponent",
    "ObservationReferenceRange",
    "Participant",
    "PatientCommunication",
    "PatientContact",
    "PatientLink",
    "Qualification",
    # Resources
    "Resource",
    "Appointment",
    "CarePlan",
    "Condition",
    "DocumentReference",
    "Encounter",
    "Location",
    "Medication",
    "MedicationAdministration",
    "MedicationRequest",
    "Observation",
    "Patient",
    "Practitioner",
    "PractitionerRole",
    "Procedure",
    "ServiceRequest",
]
