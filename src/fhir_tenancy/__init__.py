"""
fhir-tenancy: tenant localization and terminology mapping for FHIR R4

Normalizes resources received from many independent tenants:
normalization standardizes code and identifier systems, localization
namespaces every local id and literal reference by tenant, and mapping
translates tenant-specific codes through per-tenant concept
maps while recording the original values as provenance.
"""

__version__ = "0.3.0"

from fhir_tenancy.localization import (
    DATA_AUTHORITY_EXTENSIONS,
    DATA_AUTHORITY_IDENTIFIER,
    localize,
    localize_id,
    localize_reference,
)
from fhir_tenancy.normalization import (
    normalize,
    normalize_coding_system,
    normalize_identifier_system,
)
from fhir_tenancy.validation import (
    Validation,
    ValidationFailedError,
    ValidationIssue,
    ValidationIssueSeverity,
)
from fhir_tenancy.config import MappingSettings
from fhir_tenancy.mapping import (
    ConceptMapCodeableConcept,
    ConceptMapCoding,
    ConceptMapMetadata,
    ConceptMapRegistry,
    InMemoryConceptMapRegistry,
    MapResponse,
    MappingService,
    build_mapping_service,
)
from fhir_tenancy.pipeline import TransformResponse, transform_resource

__all__ = [
    "__version__",
    # Localization
    "localize",
    "localize_id",
    "localize_reference",
    "DATA_AUTHORITY_IDENTIFIER",
    "DATA_AUTHORITY_EXTENSIONS",
    # Normalization
    "normalize",
    "normalize_coding_system",
    "normalize_identifier_system",
    # Validation
    "Validation",
    "ValidationIssue",
    "ValidationIssueSeverity",
    "ValidationFailedError",
    # Mapping
    "ConceptMapRegistry",
    "ConceptMapCodeableConcept",
    "ConceptMapCoding",
    "ConceptMapMetadata",
    "InMemoryConceptMapRegistry",
    "MappingService",
    "MapResponse",
    "build_mapping_service",
    "MappingSettings",
    # Pipeline
    "transform_resource",
    "TransformResponse",
]
