"""Shared fixtures: a concept-map registry that records every lookup."""

import pytest

from fhir_tenancy.mapping import InMemoryConceptMapRegistry


class RecordingRegistry(InMemoryConceptMapRegistry):
    """In-memory registry that keeps a log of lookups as
    ``(kind, tenant, field_path, source, force_cache_reload_ts)``."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def get_concept_mapping(
        self, tenant, field_path, codeable_concept, resource,
        force_cache_reload_ts=None,
    ):
        self.calls.append(
            ("concept", tenant, field_path, codeable_concept, force_cache_reload_ts)
        )
        return super().get_concept_mapping(
            tenant, field_path, codeable_concept, resource, force_cache_reload_ts,
        )

    def get_concept_mapping_for_enum(
        self, tenant, field_path, coding, target_values, extension_url,
        resource, force_cache_reload_ts=None,
    ):
        self.calls.append(
            ("enum", tenant, field_path, coding, force_cache_reload_ts)
        )
        return super().get_concept_mapping_for_enum(
            tenant, field_path, coding, target_values, extension_url,
            resource, force_cache_reload_ts,
        )

    @property
    def field_paths(self):
        return [call[2] for call in self.calls]


@pytest.fixture
def registry():
    return RecordingRegistry()
