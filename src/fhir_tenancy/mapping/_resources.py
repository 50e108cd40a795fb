"""
Per-resource concept mapping rules.

Each mapper declares the fields it maps and the order it maps them in;
issues are reported in that order.  Three shapes cover most resources:

  - :class:`CodeableConceptFieldMapper`: CodeableConcept fields looked
    up through the registry (repeating fields entry by entry).
  - :class:`StatusEnumMapper`: a bare ``status`` code looked up against
    a fixed value set.
  - :class:`VerbatimProvenanceMapper`: no lookup; the field's value is
    recorded verbatim as provenance.

:class:`ObservationMapper` and :class:`ConditionMapper` add their own
rules on top.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, ClassVar, Iterable, Optional

from fhir_tenancy._constants import (
    APPOINTMENT_STATUS_CODES,
    MEDICATION_ADMINISTRATION_STATUS_CODES,
)
from fhir_tenancy.mapping._base import (
    BaseMapper,
    MapResponse,
    apply_mapping,
    to_fhir_name,
    verbatim_provenance,
)
from fhir_tenancy.mapping._registry import (
    ConceptMapRegistry,
    tenant_source_extension_url,
)
from fhir_tenancy.model import (
    Appointment,
    CarePlan,
    Code,
    CodeableConcept,
    Condition,
    DocumentReference,
    Encounter,
    Extension,
    Medication,
    MedicationAdministration,
    Observation,
    Procedure,
    Resource,
    ServiceRequest,
)
from fhir_tenancy.validation import Validation

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# GENERIC MAPPERS
# ═══════════════════════════════════════════════════════════════════


class CodeableConceptFieldMapper(BaseMapper):
    """Maps the CodeableConcept fields named in :attr:`mapped_fields`.

    A repeating field is mapped entry by entry: every entry is looked up
    (all sharing the field's path and location), mapped entries are
    replaced in place and unmapped ones are kept.
    """

    supported_resource: ClassVar[type]
    mapped_fields: ClassVar[tuple[str, ...]] = ()

    def map(
        self,
        resource: Any,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        validation = Validation()
        changes: dict[str, Any] = {}
        new_extensions: list[Extension] = []

        for attribute in self.mapped_fields:
            path = f"{resource.resource_type}.{to_fhir_name(attribute)}"
            current = getattr(resource, attribute)
            mapped = self._map_codeable_concepts(
                current, path, path, resource, tenant, validation,
                new_extensions, force_cache_reload_ts,
            )
            if mapped is not current:
                changes[attribute] = mapped

        return MapResponse(apply_mapping(resource, changes, new_extensions), validation)

    def _map_codeable_concepts(
        self,
        value: Any,
        field_path: str,
        location: str,
        resource: Resource,
        tenant: str,
        validation: Validation,
        new_extensions: list[Extension],
        force_cache_reload_ts: Optional[datetime],
    ) -> Any:
        """Map one CodeableConcept or a tuple of them.

        Anything else (``None``, another ``value[x]`` alternative) is
        returned as is.  Provenance for each hit goes on *new_extensions*.
        """
        if isinstance(value, tuple):
            entries = tuple(
                self._map_codeable_concepts(
                    entry, field_path, location, resource, tenant, validation,
                    new_extensions, force_cache_reload_ts,
                )
                for entry in value
            )
            if all(new is old for new, old in zip(entries, value)):
                return value
            return entries

        if not isinstance(value, CodeableConcept):
            return value

        mapped = self._get_concept_mapping(
            value, field_path, location, resource, tenant, validation,
            force_cache_reload_ts,
        )
        if mapped is None:
            return value
        new_extensions.append(mapped.extension)
        return mapped.codeable_concept


class StatusEnumMapper(BaseMapper):
    """Maps a bare ``status`` code against :attr:`target_values`."""

    supported_resource: ClassVar[type]
    target_values: ClassVar[frozenset[str]]
    keep_coding_id: ClassVar[bool] = False
    """Carry the registry coding's element id onto the mapped status."""

    def map(
        self,
        resource: Any,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        validation = Validation()
        status = resource.status
        if status is None or status.value is None:
            return MapResponse(resource, validation)

        path = f"{resource.resource_type}.status"
        mapped = self._get_concept_mapping_for_enum(
            status.value, path, path, self.target_values,
            tenant_source_extension_url(path),
            resource, tenant, validation, force_cache_reload_ts,
        )
        if mapped is None:
            return MapResponse(resource, validation)

        element_id = mapped.coding.id if self.keep_coding_id else None
        new_status = Code(value=mapped.coding.code, id=element_id)
        return MapResponse(
            apply_mapping(resource, {"status": new_status}, [mapped.extension]),
            validation,
        )


class VerbatimProvenanceMapper(BaseMapper):
    """Records :attr:`source_field` verbatim as tenant-source provenance.

    No lookup is made, so this mapper never reports an issue.
    """

    supported_resource: ClassVar[type]
    source_field: ClassVar[str]

    def map(
        self,
        resource: Any,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        path = f"{resource.resource_type}.{to_fhir_name(self.source_field)}"
        provenance = verbatim_provenance(
            tenant_source_extension_url(path), getattr(resource, self.source_field),
        )
        return MapResponse(apply_mapping(resource, {}, provenance), Validation())


class PassThroughMapper:
    """Resource mapper for types with no resource-level concept maps.

    Element mappers still run over these resources through the
    mapping service.
    """

    def __init__(self, supported_resource: type) -> None:
        self.supported_resource = supported_resource

    def map(
        self,
        resource: Any,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        return MapResponse(resource, Validation())


# ═══════════════════════════════════════════════════════════════════
# RESOURCE MAPPERS
# ═══════════════════════════════════════════════════════════════════


class AppointmentMapper(StatusEnumMapper):
    supported_resource = Appointment
    target_values = APPOINTMENT_STATUS_CODES


class CarePlanMapper(CodeableConceptFieldMapper):
    supported_resource = CarePlan
    mapped_fields = ("category",)


class ConditionMapper(CodeableConceptFieldMapper):
    """Maps ``Condition.code``.

    Tenants in *tenants_not_condition_mapped* skip the lookup: their
    code is kept as sent and only recorded as provenance.
    """

    supported_resource = Condition
    mapped_fields = ("code",)

    def __init__(
        self,
        registry: ConceptMapRegistry,
        tenants_not_condition_mapped: Iterable[str] = (),
    ) -> None:
        super().__init__(registry)
        self.tenants_not_condition_mapped = frozenset(tenants_not_condition_mapped)

    def map(
        self,
        resource: Any,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        if tenant not in self.tenants_not_condition_mapped:
            return super().map(resource, tenant, force_cache_reload_ts)

        logger.debug("Tenant %s is not condition mapped; keeping Condition.code", tenant)
        provenance = verbatim_provenance(
            tenant_source_extension_url("Condition.code"), resource.code,
        )
        return MapResponse(apply_mapping(resource, {}, provenance), Validation())


class DocumentReferenceMapper(CodeableConceptFieldMapper):
    supported_resource = DocumentReference
    mapped_fields = ("type",)


class EncounterMapper(VerbatimProvenanceMapper):
    supported_resource = Encounter
    source_field = "class_"


# TODO: look Medication.code up through the registry once medication
# concept maps are published; until then the code is only recorded.
class MedicationMapper(VerbatimProvenanceMapper):
    supported_resource = Medication
    source_field = "code"


class MedicationAdministrationMapper(StatusEnumMapper):
    supported_resource = MedicationAdministration
    target_values = MEDICATION_ADMINISTRATION_STATUS_CODES
    keep_coding_id = True


class ObservationMapper(CodeableConceptFieldMapper):
    """Maps code, valueCodeableConcept, then each component's pair.

    Component provenance lands on the component's own extension list;
    component issues are located at ``Observation.component[i]``.
    """

    supported_resource = Observation

    def map(
        self,
        resource: Any,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        validation = Validation()
        changes: dict[str, Any] = {}
        new_extensions: list[Extension] = []

        for attribute, path in (
            ("code", "Observation.code"),
            ("value", "Observation.valueCodeableConcept"),
        ):
            current = getattr(resource, attribute)
            mapped = self._map_codeable_concepts(
                current, path, path, resource, tenant, validation,
                new_extensions, force_cache_reload_ts,
            )
            if mapped is not current:
                changes[attribute] = mapped

        components = tuple(
            self._map_component(
                component, index, resource, tenant, validation,
                force_cache_reload_ts,
            )
            for index, component in enumerate(resource.component)
        )
        if any(new is not old for new, old in zip(components, resource.component)):
            changes["component"] = components

        return MapResponse(apply_mapping(resource, changes, new_extensions), validation)

    def _map_component(
        self,
        component: Any,
        index: int,
        resource: Observation,
        tenant: str,
        validation: Validation,
        force_cache_reload_ts: Optional[datetime],
    ) -> Any:
        changes: dict[str, Any] = {}
        new_extensions: list[Extension] = []
        parent = f"Observation.component[{index}]"

        for attribute, name in (("code", "code"), ("value", "valueCodeableConcept")):
            current = getattr(component, attribute)
            mapped = self._map_codeable_concepts(
                current,
                f"Observation.component.{name}",
                f"{parent}.{name}",
                resource, tenant, validation, new_extensions,
                force_cache_reload_ts,
            )
            if mapped is not current:
                changes[attribute] = mapped

        return apply_mapping(component, changes, new_extensions)


class ProcedureMapper(CodeableConceptFieldMapper):
    supported_resource = Procedure
    mapped_fields = ("code",)


class ServiceRequestMapper(CodeableConceptFieldMapper):
    supported_resource = ServiceRequest
    mapped_fields = ("category", "code")
