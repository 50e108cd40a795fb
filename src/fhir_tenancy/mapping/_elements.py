"""Element mappers: concept mapping for data types wherever they appear."""

from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Any, Optional

from fhir_tenancy._constants import (
    CONTACT_POINT_SYSTEM_CODES,
    CONTACT_POINT_USE_CODES,
)
from fhir_tenancy.mapping._base import BaseMapper
from fhir_tenancy.mapping._registry import tenant_source_extension_url
from fhir_tenancy.model import ContactPoint, Resource
from fhir_tenancy.validation import Validation

_CONTACT_POINT_FIELDS = (
    ("system", CONTACT_POINT_SYSTEM_CODES),
    ("use", CONTACT_POINT_USE_CODES),
)


class ContactPointMapper(BaseMapper):
    """Maps ``ContactPoint.system`` and ``ContactPoint.use``.

    Both are enum lookups keyed by ``<ResourceType>.telecom.<field>``.
    The provenance extension is appended to the mapped Code itself.
    """

    supported_element = ContactPoint

    def map(
        self,
        element: ContactPoint,
        resource: Resource,
        tenant: str,
        location: str,
        validation: Validation,
        force_cache_reload_ts: Optional[datetime] = None,
    ) -> ContactPoint:
        changes: dict[str, Any] = {}
        for name, target_values in _CONTACT_POINT_FIELDS:
            code = getattr(element, name)
            if code is None or code.value is None:
                continue
            field_path = f"{resource.resource_type}.telecom.{name}"
            mapped = self._get_concept_mapping_for_enum(
                code.value,
                field_path,
                f"{location}.{name}",
                target_values,
                tenant_source_extension_url(field_path),
                resource,
                tenant,
                validation,
                force_cache_reload_ts,
            )
            if mapped is not None:
                changes[name] = dataclasses.replace(
                    code,
                    value=mapped.coding.code,
                    extension=code.extension + (mapped.extension,),
                )

        if not changes:
            return element
        return dataclasses.replace(element, **changes)
