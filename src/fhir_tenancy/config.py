"""
Externalized configuration for the mapping layer.

Values come from keyword arguments or from ``FHIR_TENANCY_*``
environment variables::

    FHIR_TENANCY_TENANTS_NOT_CONDITION_MAPPED="acme,globex"
"""

from __future__ import annotations

from typing import Annotated, Any, FrozenSet

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class MappingSettings(BaseSettings):
    """Settings consumed by :func:`fhir_tenancy.mapping.build_mapping_service`."""

    model_config = SettingsConfigDict(env_prefix="FHIR_TENANCY_", frozen=True)

    tenants_not_condition_mapped: Annotated[FrozenSet[str], NoDecode] = Field(
        default_factory=frozenset,
        description=(
            "Tenant mnemonics whose Condition.code is kept as sent; only the "
            "tenant-source provenance extension is attached"
        ),
    )

    @field_validator("tenants_not_condition_mapped", mode="before")
    @classmethod
    def _split_mnemonics(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = value.split(",")
        stripped = (str(mnemonic).strip() for mnemonic in value)
        return frozenset(mnemonic for mnemonic in stripped if mnemonic)
