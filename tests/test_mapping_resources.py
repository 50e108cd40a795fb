"""Tests for the per-resource concept mappers.

Every mappable field is attempted independently: hits replace the field
and append a provenance extension, misses leave the field as authored
and add one issue.  Issues follow each mapper's field order.
"""

from datetime import datetime

import pytest

from fhir_tenancy._constants import (
    FAILED_CONCEPT_MAP_LOOKUP,
    CONCEPT_MAP_INVALID_VALUE_SET,
    TENANT_SOURCE_APPOINTMENT_STATUS,
    TENANT_SOURCE_CARE_PLAN_CATEGORY,
    TENANT_SOURCE_CONDITION_CODE,
    TENANT_SOURCE_DOCUMENT_REFERENCE_TYPE,
    TENANT_SOURCE_ENCOUNTER_CLASS,
    TENANT_SOURCE_MEDICATION_ADMINISTRATION_STATUS,
    TENANT_SOURCE_MEDICATION_CODE,
    TENANT_SOURCE_OBSERVATION_CODE,
    TENANT_SOURCE_OBSERVATION_COMPONENT_CODE,
    TENANT_SOURCE_OBSERVATION_VALUE,
    TENANT_SOURCE_PROCEDURE_CODE,
    TENANT_SOURCE_SERVICE_REQUEST_CATEGORY,
    TENANT_SOURCE_SERVICE_REQUEST_CODE,
)
from fhir_tenancy.mapping import (
    AppointmentMapper,
    CarePlanMapper,
    ConditionMapper,
    DocumentReferenceMapper,
    EncounterMapper,
    MedicationAdministrationMapper,
    MedicationMapper,
    ObservationMapper,
    ProcedureMapper,
    ServiceRequestMapper,
    code_system_uri,
    to_tenant_coding,
)
from fhir_tenancy.model import (
    Appointment,
    CarePlan,
    Code,
    CodeableConcept,
    Coding,
    Condition,
    DocumentReference,
    Encounter,
    Extension,
    Medication,
    MedicationAdministration,
    Observation,
    ObservationComponent,
    Procedure,
    Quantity,
    ServiceRequest,
)

TENANT = "test"
EXISTING = Extension(url="http://example.org/existing", value="kept")


def _concept(code, system="urn:tenant:codes"):
    return CodeableConcept(coding=(Coding(system=system, code=code),))


def _target(code):
    return Coding(system="http://snomed.info/sct", code=code, display=f"Target {code}")


def _mapped(code):
    return CodeableConcept(coding=(_target(code),), text=f"Target {code}")


def _add(registry, field_path, source_code, target_code, extension_url):
    registry.add_mapping(
        TENANT, field_path,
        Coding(system="urn:tenant:codes", code=source_code),
        _target(target_code),
        extension_url=extension_url,
    )


def _messages(response):
    return [str(issue) for issue in response.validation.issues()]


# ═══════════════════════════════════════════════════════════════════
# CarePlan
# ═══════════════════════════════════════════════════════════════════


class TestCarePlanMapper:

    def test_exact_miss_message(self, registry):
        care_plan = CarePlan(category=(
            CodeableConcept(coding=(Coding(system="something-here-1", code="54321"),)),
        ))
        response = CarePlanMapper(registry).map(care_plan, "tenant")

        assert response.mapped_resource is care_plan
        assert _messages(response) == [
            "ERROR NOV_CONMAP_LOOKUP: Tenant source value '54321' has no target "
            "defined in any CarePlan.category concept map for tenant 'tenant' "
            "@ CarePlan.category"
        ]

    def test_every_category_attempted(self, registry):
        _add(registry, "CarePlan.category", "A", "111", TENANT_SOURCE_CARE_PLAN_CATEGORY)
        care_plan = CarePlan(
            category=(_concept("A"), _concept("B")),
            extension=(EXISTING,),
        )
        response = CarePlanMapper(registry).map(care_plan, TENANT)
        mapped = response.mapped_resource

        assert mapped.category == (_mapped("111"), _concept("B"))
        assert mapped.extension == (
            EXISTING,
            Extension(url=TENANT_SOURCE_CARE_PLAN_CATEGORY, value=_concept("A")),
        )
        (issue,) = response.validation.issues()
        assert issue.location == "CarePlan.category"
        assert "'B'" in issue.description

    def test_multiple_codings_joined_in_message(self, registry):
        category = CodeableConcept(coding=(Coding(code="1"), Coding(code="2"), Coding(system="s")))
        response = CarePlanMapper(registry).map(CarePlan(category=(category,)), TENANT)
        (issue,) = response.validation.issues()
        assert issue.description.startswith("Tenant source value '1, 2' ")

    def test_no_categories(self, registry):
        care_plan = CarePlan(title="plan")
        response = CarePlanMapper(registry).map(care_plan, TENANT)
        assert response.mapped_resource is care_plan
        assert not response.validation.has_issues()
        assert registry.calls == []


# ═══════════════════════════════════════════════════════════════════
# ServiceRequest: partial failure and field order
# ═══════════════════════════════════════════════════════════════════


class TestServiceRequestMapper:

    def test_partial_failure(self, registry):
        _add(registry, "ServiceRequest.category", "LAB", "108252007",
             TENANT_SOURCE_SERVICE_REQUEST_CATEGORY)
        request = ServiceRequest(category=(_concept("LAB"),), code=_concept("CMP"))
        response = ServiceRequestMapper(registry).map(request, TENANT)
        mapped = response.mapped_resource

        assert mapped.category == (_mapped("108252007"),)
        assert mapped.code is request.code
        assert mapped.extension == (
            Extension(url=TENANT_SOURCE_SERVICE_REQUEST_CATEGORY, value=_concept("LAB")),
        )
        (issue,) = response.validation.issues()
        assert issue.code == FAILED_CONCEPT_MAP_LOOKUP
        assert issue.location == "ServiceRequest.code"

    def test_field_order(self, registry):
        request = ServiceRequest(category=(_concept("LAB"),), code=_concept("CMP"))
        response = ServiceRequestMapper(registry).map(request, TENANT)
        assert [issue.location for issue in response.validation.issues()] == [
            "ServiceRequest.category",
            "ServiceRequest.code",
        ]
        assert registry.field_paths == ["ServiceRequest.category", "ServiceRequest.code"]

    def test_provenance_in_field_order(self, registry):
        _add(registry, "ServiceRequest.category", "LAB", "1", TENANT_SOURCE_SERVICE_REQUEST_CATEGORY)
        _add(registry, "ServiceRequest.code", "CMP", "2", TENANT_SOURCE_SERVICE_REQUEST_CODE)
        request = ServiceRequest(category=(_concept("LAB"),), code=_concept("CMP"))
        response = ServiceRequestMapper(registry).map(request, TENANT)
        assert [ext.url for ext in response.mapped_resource.extension] == [
            TENANT_SOURCE_SERVICE_REQUEST_CATEGORY,
            TENANT_SOURCE_SERVICE_REQUEST_CODE,
        ]
        assert not response.validation.has_issues()

    def test_cache_reload_timestamp_passed_through(self, registry):
        reload_ts = datetime(2024, 5, 1, 12, 0)
        request = ServiceRequest(code=_concept("CMP"))
        ServiceRequestMapper(registry).map(request, TENANT, reload_ts)
        assert registry.calls[0][4] == reload_ts


# ═══════════════════════════════════════════════════════════════════
# Observation
# ═══════════════════════════════════════════════════════════════════


class TestObservationMapper:

    def test_component_location_indexed(self, registry):
        observation = Observation(component=(
            ObservationComponent(code=_concept("SYS")),
        ))
        response = ObservationMapper(registry).map(observation, TENANT)
        (issue,) = response.validation.issues()
        assert issue.location == "Observation.component[0].code"
        assert "any Observation.component.code concept map" in issue.description
        assert registry.field_paths == ["Observation.component.code"]

    def test_field_order_across_components(self, registry):
        observation = Observation(
            code=_concept("BP"),
            value=_concept("HIGH"),
            component=(
                ObservationComponent(code=_concept("SYS"), value=_concept("S")),
                ObservationComponent(code=_concept("DIA"), value=Quantity(value=80)),
            ),
        )
        response = ObservationMapper(registry).map(observation, TENANT)
        assert [issue.location for issue in response.validation.issues()] == [
            "Observation.code",
            "Observation.valueCodeableConcept",
            "Observation.component[0].code",
            "Observation.component[0].valueCodeableConcept",
            "Observation.component[1].code",
        ]
        assert response.mapped_resource is observation

    def test_component_provenance_on_component(self, registry):
        _add(registry, "Observation.code", "BP", "75367002", TENANT_SOURCE_OBSERVATION_CODE)
        _add(registry, "Observation.component.code", "SYS", "271649006",
             TENANT_SOURCE_OBSERVATION_COMPONENT_CODE)
        untouched = ObservationComponent(code=_concept("DIA"))
        observation = Observation(
            code=_concept("BP"),
            component=(ObservationComponent(code=_concept("SYS")), untouched),
        )
        response = ObservationMapper(registry).map(observation, TENANT)
        mapped = response.mapped_resource

        assert mapped.code == _mapped("75367002")
        assert mapped.extension == (
            Extension(url=TENANT_SOURCE_OBSERVATION_CODE, value=_concept("BP")),
        )
        assert mapped.component[0].code == _mapped("271649006")
        assert mapped.component[0].extension == (
            Extension(url=TENANT_SOURCE_OBSERVATION_COMPONENT_CODE, value=_concept("SYS")),
        )
        assert mapped.component[1] is untouched
        assert [issue.location for issue in response.validation.issues()] == [
            "Observation.component[1].code",
        ]

    def test_value_codeable_concept_mapped(self, registry):
        _add(registry, "Observation.valueCodeableConcept", "POS", "10828004",
             TENANT_SOURCE_OBSERVATION_VALUE)
        observation = Observation(value=_concept("POS"))
        mapped = ObservationMapper(registry).map(observation, TENANT).mapped_resource
        assert mapped.value == _mapped("10828004")
        assert mapped.extension[0].url == TENANT_SOURCE_OBSERVATION_VALUE

    def test_non_coded_value_skipped(self, registry):
        observation = Observation(value=Quantity(value=98.6, unit="degF"))
        response = ObservationMapper(registry).map(observation, TENANT)
        assert response.mapped_resource is observation
        assert not response.validation.has_issues()
        assert registry.calls == []


# ═══════════════════════════════════════════════════════════════════
# Condition
# ═══════════════════════════════════════════════════════════════════


class TestConditionMapper:

    def test_mapped(self, registry):
        _add(registry, "Condition.code", "DM2", "44054006", TENANT_SOURCE_CONDITION_CODE)
        condition = Condition(code=_concept("DM2"))
        response = ConditionMapper(registry).map(condition, TENANT)
        assert response.mapped_resource.code == _mapped("44054006")
        assert response.mapped_resource.extension == (
            Extension(url=TENANT_SOURCE_CONDITION_CODE, value=_concept("DM2")),
        )

    def test_miss(self, registry):
        condition = Condition(code=_concept("DM2"))
        response = ConditionMapper(registry).map(condition, TENANT)
        assert response.mapped_resource is condition
        (issue,) = response.validation.issues()
        assert issue.location == "Condition.code"

    def test_opted_out_tenant_gets_verbatim_provenance(self, registry):
        condition = Condition(code=_concept("DM2"), extension=(EXISTING,))
        mapper = ConditionMapper(registry, tenants_not_condition_mapped={"test", "other"})
        response = mapper.map(condition, TENANT)

        assert response.mapped_resource.code is condition.code
        assert response.mapped_resource.extension == (
            EXISTING,
            Extension(url=TENANT_SOURCE_CONDITION_CODE, value=_concept("DM2")),
        )
        assert not response.validation.has_issues()
        assert registry.calls == []

    def test_opted_out_tenant_without_code(self, registry):
        condition = Condition(subject=None)
        mapper = ConditionMapper(registry, tenants_not_condition_mapped=["test"])
        assert mapper.map(condition, TENANT).mapped_resource is condition


# ═══════════════════════════════════════════════════════════════════
# Single CodeableConcept fields
# ═══════════════════════════════════════════════════════════════════


class TestSingleFieldMappers:

    def test_document_reference_type(self, registry):
        _add(registry, "DocumentReference.type", "NOTE", "34109-9",
             TENANT_SOURCE_DOCUMENT_REFERENCE_TYPE)
        document = DocumentReference(type=_concept("NOTE"))
        mapped = DocumentReferenceMapper(registry).map(document, TENANT).mapped_resource
        assert mapped.type == _mapped("34109-9")
        assert mapped.extension[0].url == TENANT_SOURCE_DOCUMENT_REFERENCE_TYPE

    def test_procedure_code_miss(self, registry):
        procedure = Procedure(code=_concept("APPY"))
        response = ProcedureMapper(registry).map(procedure, TENANT)
        assert _messages(response) == [
            "ERROR NOV_CONMAP_LOOKUP: Tenant source value 'APPY' has no target "
            "defined in any Procedure.code concept map for tenant 'test' @ Procedure.code"
        ]

    def test_procedure_code_mapped(self, registry):
        _add(registry, "Procedure.code", "APPY", "80146002", TENANT_SOURCE_PROCEDURE_CODE)
        procedure = Procedure(code=_concept("APPY"))
        response = ProcedureMapper(registry).map(procedure, TENANT)
        assert response.mapped_resource.code == _mapped("80146002")
        assert not response.validation.has_issues()


# ═══════════════════════════════════════════════════════════════════
# Verbatim provenance
# ═══════════════════════════════════════════════════════════════════


class TestVerbatimProvenanceMappers:

    def test_encounter_class(self, registry):
        encounter_class = Coding(system="urn:tenant:class", code="IMP")
        encounter = Encounter(class_=encounter_class)
        response = EncounterMapper(registry).map(encounter, TENANT)
        assert response.mapped_resource.class_ is encounter_class
        assert response.mapped_resource.extension == (
            Extension(url=TENANT_SOURCE_ENCOUNTER_CLASS, value=encounter_class),
        )
        assert registry.calls == []

    def test_encounter_without_class(self, registry):
        encounter = Encounter()
        assert EncounterMapper(registry).map(encounter, TENANT).mapped_resource is encounter

    def test_medication_code(self, registry):
        medication = Medication(code=_concept("RX1"))
        response = MedicationMapper(registry).map(medication, TENANT)
        assert response.mapped_resource.code is medication.code
        assert response.mapped_resource.extension == (
            Extension(url=TENANT_SOURCE_MEDICATION_CODE, value=_concept("RX1")),
        )
        assert not response.validation.has_issues()


# ═══════════════════════════════════════════════════════════════════
# Enum-constrained status
# ═══════════════════════════════════════════════════════════════════


class TestStatusEnumMappers:

    def _add_status(self, registry, field_path, source, target, element_id=None):
        registry.add_mapping(
            TENANT, field_path,
            to_tenant_coding(TENANT, field_path, source),
            Coding(system="http://hl7.org/fhir/status", code=target, id=element_id),
        )

    def test_appointment_status_mapped(self, registry):
        self._add_status(registry, "Appointment.status", "BK", "booked")
        appointment = Appointment(status=Code("BK"))
        response = AppointmentMapper(registry).map(appointment, TENANT)

        assert response.mapped_resource.status == Code("booked")
        assert response.mapped_resource.extension == (
            Extension(
                url=TENANT_SOURCE_APPOINTMENT_STATUS,
                value=to_tenant_coding(TENANT, "Appointment.status", "BK"),
            ),
        )
        assert not response.validation.has_issues()

    def test_appointment_status_already_valid(self, registry):
        appointment = Appointment(status=Code("arrived"))
        response = AppointmentMapper(registry).map(appointment, TENANT)
        assert response.mapped_resource.status == Code("arrived")
        assert len(response.mapped_resource.extension) == 1

    def test_appointment_status_miss(self, registry):
        appointment = Appointment(status=Code("BK"))
        response = AppointmentMapper(registry).map(appointment, TENANT)
        assert response.mapped_resource is appointment
        assert _messages(response) == [
            "ERROR NOV_CONMAP_LOOKUP: Tenant source value 'BK' has no target "
            "defined in any Appointment.status concept map for tenant 'test' "
            "@ Appointment.status"
        ]
        (call,) = registry.calls
        assert call[3] == Coding(
            system=code_system_uri(TENANT, "Appointment.status"), code="BK",
        )

    def test_appointment_status_outside_value_set(self, registry):
        self._add_status(registry, "Appointment.status", "BK", "reserved")
        appointment = Appointment(status=Code("BK"))
        response = AppointmentMapper(registry).map(appointment, TENANT)

        assert response.mapped_resource is appointment
        (issue,) = response.validation.issues()
        assert issue.code == CONCEPT_MAP_INVALID_VALUE_SET
        assert issue.description == (
            f"{code_system_uri(TENANT, 'Appointment.status')} mapped 'BK' to "
            f"'reserved' which is outside of required value set"
        )
        assert issue.location == "Appointment.status"
        assert len(issue.metadata) == 1

    def test_appointment_without_status(self, registry):
        appointment = Appointment(status=Code(None))
        response = AppointmentMapper(registry).map(appointment, TENANT)
        assert response.mapped_resource is appointment
        assert registry.calls == []

    def test_medication_administration_keeps_coding_id(self, registry):
        self._add_status(
            registry, "MedicationAdministration.status", "DONE", "completed",
            element_id="status-1",
        )
        administration = MedicationAdministration(status=Code("DONE"))
        response = MedicationAdministrationMapper(registry).map(administration, TENANT)
        mapped = response.mapped_resource
        assert mapped.status == Code("completed", id="status-1")
        assert mapped.extension[0].url == TENANT_SOURCE_MEDICATION_ADMINISTRATION_STATUS


@pytest.mark.parametrize("mapper_class, resource_class", [
    (CarePlanMapper, CarePlan),
    (ServiceRequestMapper, ServiceRequest),
    (ObservationMapper, Observation),
    (ConditionMapper, Condition),
    (ProcedureMapper, Procedure),
    (DocumentReferenceMapper, DocumentReference),
    (AppointmentMapper, Appointment),
    (MedicationAdministrationMapper, MedicationAdministration),
    (EncounterMapper, Encounter),
    (MedicationMapper, Medication),
])
def test_empty_resource_is_returned_as_is(registry, mapper_class, resource_class):
    resource = resource_class()
    mapper = mapper_class(registry)
    assert mapper.supported_resource is resource_class
    response = mapper.map(resource, TENANT)
    assert response.mapped_resource is resource
    assert response.validation.issues() == []
