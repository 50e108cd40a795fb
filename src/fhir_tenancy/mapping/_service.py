"""
Mapping workflow for whole resources.

:meth:`MappingService.map` runs the resource's own mapper first, then
walks every field of the result (``contained`` excepted) and applies
the element mappers wherever their element type appears.  Issues from
both passes land in one :class:`~fhir_tenancy.validation.Validation`,
resource-level issues first, element issues in traversal order.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Iterable, Optional

from fhir_tenancy.config import MappingSettings
from fhir_tenancy.mapping._base import (
    ElementMapper,
    MapResponse,
    ResourceMapper,
    to_fhir_name,
)
from fhir_tenancy.mapping._elements import ContactPointMapper
from fhir_tenancy.mapping._registry import ConceptMapRegistry
from fhir_tenancy.mapping._resources import (
    AppointmentMapper,
    CarePlanMapper,
    ConditionMapper,
    DocumentReferenceMapper,
    EncounterMapper,
    MedicationAdministrationMapper,
    MedicationMapper,
    ObservationMapper,
    PassThroughMapper,
    ProcedureMapper,
    ServiceRequestMapper,
)
from fhir_tenancy.model import (
    Code,
    Id,
    Location,
    MedicationRequest,
    Patient,
    Practitioner,
    PractitionerRole,
    Resource,
    Uri,
)
from fhir_tenancy.validation import Validation

_PRIMITIVES = (Id, Code, Uri)


class MappingService:
    """Dispatches resources to their mapper and runs element mappers.

    Args:
        resource_mappers: One mapper per supported resource class.
        element_mappers: Mappers applied to data types anywhere in a
            resource.
    """

    def __init__(
        self,
        resource_mappers: Iterable[ResourceMapper],
        element_mappers: Iterable[ElementMapper] = (),
    ) -> None:
        self._resource_mappers: dict[type, ResourceMapper] = {
            mapper.supported_resource: mapper for mapper in resource_mappers
        }
        self._element_mappers: dict[type, ElementMapper] = {
            mapper.supported_element: mapper for mapper in element_mappers
        }

    @property
    def supported_resources(self) -> frozenset[type]:
        return frozenset(self._resource_mappers)

    def map(
        self,
        resource: Resource,
        tenant: str,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> MapResponse:
        """Map *resource* for *tenant*.

        Raises:
            ValueError: If no resource mapper handles ``type(resource)``.
        """
        if type(resource) not in self.supported_resources:
            raise ValueError(
                f"No resource mapper defined for {type(resource).__name__}"
            )

        mapper = self._resource_mappers[type(resource)]
        response = mapper.map(resource, tenant, force_cache_reload_ts)
        element_validation = Validation()
        mapped = self._map_fields(
            response.mapped_resource,
            response.mapped_resource,
            tenant,
            resource.resource_type,
            element_validation,
            force_cache_reload_ts,
        )
        return MapResponse(mapped, response.validation.merge(element_validation))

    def _map_fields(
        self,
        node: Any,
        resource: Resource,
        tenant: str,
        location: str,
        validation: Validation,
        force_cache_reload_ts: Optional[datetime],
    ) -> Any:
        changes: dict[str, Any] = {}
        for field in dataclasses.fields(node):
            if field.name == "contained":
                continue
            current = getattr(node, field.name)
            field_location = f"{location}.{to_fhir_name(field.name)}"

            if isinstance(current, tuple):
                mapped = tuple(
                    self._map_value(
                        item, resource, tenant, f"{field_location}[{index}]",
                        validation, force_cache_reload_ts,
                    )
                    for index, item in enumerate(current)
                )
                if all(new is old for new, old in zip(mapped, current)):
                    mapped = current
            else:
                mapped = self._map_value(
                    current, resource, tenant, field_location, validation,
                    force_cache_reload_ts,
                )

            if mapped is not current:
                changes[field.name] = mapped

        if not changes:
            return node
        return dataclasses.replace(node, **changes)

    def _map_value(
        self,
        value: Any,
        resource: Resource,
        tenant: str,
        location: str,
        validation: Validation,
        force_cache_reload_ts: Optional[datetime],
    ) -> Any:
        # Scalars, primitive elements and nested resources are left alone.
        if (
            not dataclasses.is_dataclass(value)
            or isinstance(value, type)
            or isinstance(value, _PRIMITIVES)
            or isinstance(value, Resource)
        ):
            return value

        element_mapper = self._element_mappers.get(type(value))
        if element_mapper is not None:
            value = element_mapper.map(
                value, resource, tenant, location, validation,
                force_cache_reload_ts,
            )
        return self._map_fields(
            value, resource, tenant, location, validation, force_cache_reload_ts,
        )


def build_mapping_service(
    registry: ConceptMapRegistry,
    settings: MappingSettings | None = None,
) -> MappingService:
    """Wire every mapper against *registry*.

    *settings* defaults to :class:`MappingSettings` read from the
    environment.
    """
    if settings is None:
        settings = MappingSettings()

    resource_mappers: list[ResourceMapper] = [
        AppointmentMapper(registry),
        CarePlanMapper(registry),
        ConditionMapper(registry, settings.tenants_not_condition_mapped),
        DocumentReferenceMapper(registry),
        EncounterMapper(registry),
        MedicationMapper(registry),
        MedicationAdministrationMapper(registry),
        ObservationMapper(registry),
        ProcedureMapper(registry),
        ServiceRequestMapper(registry),
    ]
    resource_mappers.extend(
        PassThroughMapper(resource_class)
        for resource_class in (
            Location, MedicationRequest, Patient, Practitioner, PractitionerRole,
        )
    )
    return MappingService(resource_mappers, [ContactPointMapper(registry)])
