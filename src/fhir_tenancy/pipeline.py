"""
End-to-end processing of one tenant-sourced resource.

:func:`transform_resource` chains the three passes in order:

  1. :func:`~fhir_tenancy.normalization.normalize` standardizes systems,
     text and empty elements so mapping sees one shape of data.
  2. :meth:`MappingService.map <fhir_tenancy.mapping.MappingService.map>`
     translates tenant codes, collecting every terminology gap.
  3. :func:`~fhir_tenancy.localization.localize` namespaces ids and
     references by tenant.

Mapping issues are logged at WARNING.  Warnings alone let the resource
through; any ERROR issue stops it before localization.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fhir_tenancy.localization import localize
from fhir_tenancy.mapping import MappingService
from fhir_tenancy.model import Resource
from fhir_tenancy.normalization import normalize
from fhir_tenancy.validation import Validation

logger = logging.getLogger(__name__)


@dataclass
class TransformResponse:
    """Outcome of :func:`transform_resource`.

    Attributes:
        resource: The normalized, mapped and localized resource, or
            ``None`` when mapping reported an error.
        validation: Every issue mapping reported.
    """

    resource: Optional[Resource]
    validation: Validation


def transform_resource(
    resource: Resource,
    tenant: str,
    mapping_service: MappingService,
    force_cache_reload_ts: Optional[datetime] = None,
) -> TransformResponse:
    """Normalize, map and localize *resource* for *tenant*.

    Raises:
        ValueError: If *tenant* is empty or *mapping_service* has no
            mapper for the resource's class.
    """
    normalized = normalize(resource, tenant)
    response = mapping_service.map(normalized, tenant, force_cache_reload_ts)
    validation = response.validation

    if validation.has_issues():
        logger.warning("Failed to map %s for tenant %s", resource.resource_type, tenant)
        for issue in validation.issues():
            logger.warning("%s", issue)
        if validation.has_errors():
            return TransformResponse(None, validation)

    return TransformResponse(localize(response.mapped_resource, tenant), validation)
