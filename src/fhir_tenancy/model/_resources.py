"""
FHIR R4 resources and their back-bone elements.

Only the elements that tenant processing reads or rewrites are
modelled.  Every resource shares the base fields declared on
:class:`Resource`; ``contained`` holds fully independent sub-resources
whose internal references are scoped to the container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from fhir_tenancy.model._datatypes import (
    Address,
    Annotation,
    Attachment,
    CodeableConcept,
    Coding,
    ContactPoint,
    Dosage,
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
    Timing,
)
from fhir_tenancy.model._primitives import Code, Id


# ── Back-bone elements ─────────────────────────────────────────────


@dataclass(frozen=True)
class Qualification:
    identifier: tuple[Identifier, ...] = ()
    code: CodeableConcept | None = None
    period: Period | None = None
    issuer: Reference | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Participant:
    """Appointment.participant."""

    type: tuple[CodeableConcept, ...] = ()
    actor: Reference | None = None
    required: Code | None = None
    status: Code | None = None
    period: Period | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class PatientCommunication:
    language: CodeableConcept | None = None
    preferred: bool | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class PatientContact:
    relationship: tuple[CodeableConcept, ...] = ()
    name: HumanName | None = None
    telecom: tuple[ContactPoint, ...] = ()
    address: Address | None = None
    gender: Code | None = None
    organization: Reference | None = None
    period: Period | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class PatientLink:
    other: Reference | None = None
    type: Code | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class NotAvailable:
    description: str | None = None
    during: Period | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class AvailableTime:
    days_of_week: tuple[Code, ...] = ()
    all_day: bool | None = None
    available_start_time: str | None = None
    available_end_time: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class ConditionStage:
    summary: CodeableConcept | None = None
    assessment: tuple[Reference, ...] = ()
    type: CodeableConcept | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class ConditionEvidence:
    code: tuple[CodeableConcept, ...] = ()
    detail: tuple[Reference, ...] = ()
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class ObservationReferenceRange:
    low: Quantity | None = None
    high: Quantity | None = None
    type: CodeableConcept | None = None
    applies_to: tuple[CodeableConcept, ...] = ()
    age: Range | None = None
    text: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


ObservationValue = Union[
    Quantity, CodeableConcept, str, bool, int, Range, Ratio, Period, None,
]


@dataclass(frozen=True)
class ObservationComponent:
    code: CodeableConcept | None = None
    value: ObservationValue = None
    data_absent_reason: CodeableConcept | None = None
    interpretation: tuple[CodeableConcept, ...] = ()
    reference_range: tuple[ObservationReferenceRange, ...] = ()
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class DocumentReferenceContent:
    attachment: Attachment | None = None
    format: Coding | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


# ── Resources ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Resource:
    """Fields shared by every domain resource."""

    resource_type: ClassVar[str] = "Resource"

    id: Id | None = None
    meta: Meta | None = None
    implicit_rules: str | None = None
    language: Code | None = None
    text: Narrative | None = None
    contained: tuple[Resource, ...] = ()
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()
    identifier: tuple[Identifier, ...] = ()


@dataclass(frozen=True)
class Patient(Resource):
    resource_type: ClassVar[str] = "Patient"

    active: bool | None = None
    name: tuple[HumanName, ...] = ()
    telecom: tuple[ContactPoint, ...] = ()
    gender: Code | None = None
    birth_date: str | None = None
    deceased: Union[bool, str, None] = None
    address: tuple[Address, ...] = ()
    marital_status: CodeableConcept | None = None
    multiple_birth: Union[bool, int, None] = None
    photo: tuple[Attachment, ...] = ()
    contact: tuple[PatientContact, ...] = ()
    communication: tuple[PatientCommunication, ...] = ()
    general_practitioner: tuple[Reference, ...] = ()
    managing_organization: Reference | None = None
    link: tuple[PatientLink, ...] = ()


@dataclass(frozen=True)
class Practitioner(Resource):
    resource_type: ClassVar[str] = "Practitioner"

    active: bool | None = None
    name: tuple[HumanName, ...] = ()
    telecom: tuple[ContactPoint, ...] = ()
    address: tuple[Address, ...] = ()
    gender: Code | None = None
    birth_date: str | None = None
    photo: tuple[Attachment, ...] = ()
    qualification: tuple[Qualification, ...] = ()
    communication: tuple[CodeableConcept, ...] = ()


@dataclass(frozen=True)
class Location(Resource):
    resource_type: ClassVar[str] = "Location"

    status: Code | None = None
    operational_status: Coding | None = None
    name: str | None = None
    alias: tuple[str, ...] = ()
    description: str | None = None
    mode: Code | None = None
    type: tuple[CodeableConcept, ...] = ()
    telecom: tuple[ContactPoint, ...] = ()
    address: Address | None = None
    physical_type: CodeableConcept | None = None
    managing_organization: Reference | None = None
    part_of: Reference | None = None
    availability_exceptions: str | None = None
    endpoint: tuple[Reference, ...] = ()


@dataclass(frozen=True)
class PractitionerRole(Resource):
    resource_type: ClassVar[str] = "PractitionerRole"

    active: bool | None = None
    period: Period | None = None
    practitioner: Reference | None = None
    organization: Reference | None = None
    code: tuple[CodeableConcept, ...] = ()
    specialty: tuple[CodeableConcept, ...] = ()
    location: tuple[Reference, ...] = ()
    healthcare_service: tuple[Reference, ...] = ()
    telecom: tuple[ContactPoint, ...] = ()
    available_time: tuple[AvailableTime, ...] = ()
    not_available: tuple[NotAvailable, ...] = ()
    availability_exceptions: str | None = None
    endpoint: tuple[Reference, ...] = ()


@dataclass(frozen=True)
class Observation(Resource):
    resource_type: ClassVar[str] = "Observation"

    based_on: tuple[Reference, ...] = ()
    part_of: tuple[Reference, ...] = ()
    status: Code | None = None
    category: tuple[CodeableConcept, ...] = ()
    code: CodeableConcept | None = None
    subject: Reference | None = None
    focus: tuple[Reference, ...] = ()
    encounter: Reference | None = None
    effective: Union[str, Period, Timing, None] = None
    issued: str | None = None
    performer: tuple[Reference, ...] = ()
    value: ObservationValue = None
    data_absent_reason: CodeableConcept | None = None
    interpretation: tuple[CodeableConcept, ...] = ()
    note: tuple[Annotation, ...] = ()
    body_site: CodeableConcept | None = None
    method: CodeableConcept | None = None
    specimen: Reference | None = None
    device: Reference | None = None
    reference_range: tuple[ObservationReferenceRange, ...] = ()
    has_member: tuple[Reference, ...] = ()
    derived_from: tuple[Reference, ...] = ()
    component: tuple[ObservationComponent, ...] = ()


@dataclass(frozen=True)
class Condition(Resource):
    resource_type: ClassVar[str] = "Condition"

    clinical_status: CodeableConcept | None = None
    verification_status: CodeableConcept | None = None
    category: tuple[CodeableConcept, ...] = ()
    severity: CodeableConcept | None = None
    code: CodeableConcept | None = None
    body_site: tuple[CodeableConcept, ...] = ()
    subject: Reference | None = None
    encounter: Reference | None = None
    onset: Union[str, Period, Range, Quantity, None] = None
    abatement: Union[str, Period, Range, Quantity, None] = None
    recorded_date: str | None = None
    recorder: Reference | None = None
    asserter: Reference | None = None
    stage: tuple[ConditionStage, ...] = ()
    evidence: tuple[ConditionEvidence, ...] = ()
    note: tuple[Annotation, ...] = ()


@dataclass(frozen=True)
class CarePlan(Resource):
    resource_type: ClassVar[str] = "CarePlan"

    instantiates_canonical: tuple[str, ...] = ()
    based_on: tuple[Reference, ...] = ()
    replaces: tuple[Reference, ...] = ()
    part_of: tuple[Reference, ...] = ()
    status: Code | None = None
    intent: Code | None = None
    category: tuple[CodeableConcept, ...] = ()
    title: str | None = None
    description: str | None = None
    subject: Reference | None = None
    encounter: Reference | None = None
    period: Period | None = None
    created: str | None = None
    author: Reference | None = None
    contributor: tuple[Reference, ...] = ()
    care_team: tuple[Reference, ...] = ()
    addresses: tuple[Reference, ...] = ()
    supporting_info: tuple[Reference, ...] = ()
    goal: tuple[Reference, ...] = ()
    note: tuple[Annotation, ...] = ()


@dataclass(frozen=True)
class Appointment(Resource):
    resource_type: ClassVar[str] = "Appointment"

    status: Code | None = None
    cancelation_reason: CodeableConcept | None = None
    service_category: tuple[CodeableConcept, ...] = ()
    service_type: tuple[CodeableConcept, ...] = ()
    specialty: tuple[CodeableConcept, ...] = ()
    appointment_type: CodeableConcept | None = None
    reason_code: tuple[CodeableConcept, ...] = ()
    reason_reference: tuple[Reference, ...] = ()
    priority: int | None = None
    description: str | None = None
    supporting_information: tuple[Reference, ...] = ()
    start: str | None = None
    end: str | None = None
    minutes_duration: int | None = None
    slot: tuple[Reference, ...] = ()
    created: str | None = None
    comment: str | None = None
    patient_instruction: str | None = None
    based_on: tuple[Reference, ...] = ()
    participant: tuple[Participant, ...] = ()
    requested_period: tuple[Period, ...] = ()


@dataclass(frozen=True)
class DocumentReference(Resource):
    resource_type: ClassVar[str] = "DocumentReference"

    master_identifier: Identifier | None = None
    status: Code | None = None
    doc_status: Code | None = None
    type: CodeableConcept | None = None
    category: tuple[CodeableConcept, ...] = ()
    subject: Reference | None = None
    date: str | None = None
    author: tuple[Reference, ...] = ()
    authenticator: Reference | None = None
    custodian: Reference | None = None
    description: str | None = None
    security_label: tuple[CodeableConcept, ...] = ()
    content: tuple[DocumentReferenceContent, ...] = ()


@dataclass(frozen=True)
class Encounter(Resource):
    resource_type: ClassVar[str] = "Encounter"

    status: Code | None = None
    class_: Coding | None = None
    type: tuple[CodeableConcept, ...] = ()
    service_type: CodeableConcept | None = None
    priority: CodeableConcept | None = None
    subject: Reference | None = None
    episode_of_care: tuple[Reference, ...] = ()
    based_on: tuple[Reference, ...] = ()
    appointment: tuple[Reference, ...] = ()
    period: Period | None = None
    length: Duration | None = None
    reason_code: tuple[CodeableConcept, ...] = ()
    reason_reference: tuple[Reference, ...] = ()
    service_provider: Reference | None = None
    part_of: Reference | None = None


@dataclass(frozen=True)
class Medication(Resource):
    resource_type: ClassVar[str] = "Medication"

    code: CodeableConcept | None = None
    status: Code | None = None
    manufacturer: Reference | None = None
    form: CodeableConcept | None = None
    amount: Ratio | None = None


@dataclass(frozen=True)
class MedicationAdministration(Resource):
    resource_type: ClassVar[str] = "MedicationAdministration"

    instantiates: tuple[str, ...] = ()
    part_of: tuple[Reference, ...] = ()
    status: Code | None = None
    status_reason: tuple[CodeableConcept, ...] = ()
    category: CodeableConcept | None = None
    medication: Union[CodeableConcept, Reference, None] = None
    subject: Reference | None = None
    context: Reference | None = None
    supporting_information: tuple[Reference, ...] = ()
    effective: Union[str, Period, None] = None
    reason_code: tuple[CodeableConcept, ...] = ()
    reason_reference: tuple[Reference, ...] = ()
    request: Reference | None = None
    device: tuple[Reference, ...] = ()
    note: tuple[Annotation, ...] = ()


@dataclass(frozen=True)
class MedicationRequest(Resource):
    resource_type: ClassVar[str] = "MedicationRequest"

    status: Code | None = None
    intent: Code | None = None
    category: tuple[CodeableConcept, ...] = ()
    priority: Code | None = None
    medication: Union[CodeableConcept, Reference, None] = None
    subject: Reference | None = None
    encounter: Reference | None = None
    authored_on: str | None = None
    requester: Reference | None = None
    reason_code: tuple[CodeableConcept, ...] = ()
    reason_reference: tuple[Reference, ...] = ()
    note: tuple[Annotation, ...] = ()
    dosage_instruction: tuple[Dosage, ...] = ()


@dataclass(frozen=True)
class Procedure(Resource):
    resource_type: ClassVar[str] = "Procedure"

    based_on: tuple[Reference, ...] = ()
    part_of: tuple[Reference, ...] = ()
    status: Code | None = None
    status_reason: CodeableConcept | None = None
    category: CodeableConcept | None = None
    code: CodeableConcept | None = None
    subject: Reference | None = None
    encounter: Reference | None = None
    performed: Union[str, Period, Range, Duration, None] = None
    recorder: Reference | None = None
    asserter: Reference | None = None
    reason_code: tuple[CodeableConcept, ...] = ()
    reason_reference: tuple[Reference, ...] = ()
    body_site: tuple[CodeableConcept, ...] = ()
    note: tuple[Annotation, ...] = ()


@dataclass(frozen=True)
class ServiceRequest(Resource):
    resource_type: ClassVar[str] = "ServiceRequest"

    based_on: tuple[Reference, ...] = ()
    replaces: tuple[Reference, ...] = ()
    requisition: Identifier | None = None
    status: Code | None = None
    intent: Code | None = None
    category: tuple[CodeableConcept, ...] = ()
    priority: Code | None = None
    code: CodeableConcept | None = None
    quantity: Union[Quantity, Ratio, Range, None] = None
    subject: Reference | None = None
    encounter: Reference | None = None
    occurrence: Union[str, Period, Timing, None] = None
    authored_on: str | None = None
    requester: Reference | None = None
    reason_code: tuple[CodeableConcept, ...] = ()
    reason_reference: tuple[Reference, ...] = ()
    note: tuple[Annotation, ...] = ()
