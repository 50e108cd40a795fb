"""
Terminology mapping: per-resource concept-map lookups with provenance.

Typical use::

    from fhir_tenancy.mapping import InMemoryConceptMapRegistry, build_mapping_service

    service = build_mapping_service(registry)
    response = service.map(resource, "acme")
    response.validation.alert_if_errors()
"""

from fhir_tenancy.mapping._base import (
    BaseMapper,
    ElementMapper,
    MapResponse,
    ResourceMapper,
    apply_mapping,
    concept_map_invalid_value_set,
    failed_concept_map_lookup,
    to_fhir_name,
    verbatim_provenance,
)
from fhir_tenancy.mapping._elements import ContactPointMapper
from fhir_tenancy.mapping._registry import (
    ConceptMapCodeableConcept,
    ConceptMapCoding,
    ConceptMapMetadata,
    ConceptMapRegistry,
    InMemoryConceptMapRegistry,
    code_system_uri,
    tenant_source_extension_url,
    to_tenant_coding,
    to_uri_name,
)
from fhir_tenancy.mapping._resources import (
    AppointmentMapper,
    CarePlanMapper,
    CodeableConceptFieldMapper,
    ConditionMapper,
    DocumentReferenceMapper,
    EncounterMapper,
    MedicationAdministrationMapper,
    MedicationMapper,
    ObservationMapper,
    PassThroughMapper,
    ProcedureMapper,
    ServiceRequestMapper,
    StatusEnumMapper,
    VerbatimProvenanceMapper,
)
from fhir_tenancy.mapping._service import MappingService, build_mapping_service

__all__ = [
    # Registry contract
    "ConceptMapRegistry",
    "ConceptMapCodeableConcept",
    "ConceptMapCoding",
    "ConceptMapMetadata",
    "InMemoryConceptMapRegistry",
    "code_system_uri",
    "tenant_source_extension_url",
    "to_tenant_coding",
    "to_uri_name",
    # Framework
    "BaseMapper",
    "ResourceMapper",
    "ElementMapper",
    "MapResponse",
    "apply_mapping",
    "verbatim_provenance",
    "to_fhir_name",
    "failed_concept_map_lookup",
    "concept_map_invalid_value_set",
    # Generic mappers
    "CodeableConceptFieldMapper",
    "StatusEnumMapper",
    "VerbatimProvenanceMapper",
    "PassThroughMapper",
    # Resource mappers
    "AppointmentMapper",
    "CarePlanMapper",
    "ConditionMapper",
    "DocumentReferenceMapper",
    "EncounterMapper",
    "MedicationMapper",
    "MedicationAdministrationMapper",
    "ObservationMapper",
    "ProcedureMapper",
    "ServiceRequestMapper",
    # Element mappers
    "ContactPointMapper",
    # Service
    "MappingService",
    "build_mapping_service",
]
