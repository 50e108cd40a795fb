"""
Primitive elements that carry their own ``id`` and extension list.

FHIR lets any primitive carry extensions.  Only the primitives whose
extensions or values matter to tenant processing are modelled as
elements here; every other primitive is a plain Python scalar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fhir_tenancy.model._datatypes import Extension


@dataclass(frozen=True)
class Id:
    """Logical id of a resource.  Localized to ``<tenant>-<value>``."""

    value: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Code:
    """A ``code`` primitive, e.g. a resource status or ContactPoint.use."""

    value: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Uri:
    value: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
