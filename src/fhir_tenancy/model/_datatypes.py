"""
General-purpose FHIR R4 data types.

Each type is a frozen dataclass; repeating elements are tuples.  Field
names are the snake_case form of the FHIR element names
(``modifierExtension`` → ``modifier_extension``).  Choice elements
(``value[x]``, ``bounds[x]``, ...) are typed as unions and hold
whichever alternative the source used.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from fhir_tenancy.model._primitives import Code, Uri


@dataclass(frozen=True)
class Extension:
    """An extension: a ``url`` plus a typed ``value``.

    ``value`` may be a scalar (string, boolean, number), any data type in
    this module, or a :class:`Reference`.  Extensions nest through
    ``extension``.
    """

    url: str | None = None
    value: Any = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Coding:
    system: str | None = None
    version: str | None = None
    code: str | None = None
    display: str | None = None
    user_selected: bool | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class CodeableConcept:
    coding: tuple[Coding, ...] = ()
    text: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Period:
    start: str | None = None
    end: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Quantity:
    value: Decimal | float | int | None = None
    comparator: Code | None = None
    unit: str | None = None
    system: str | None = None
    code: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


SimpleQuantity = Quantity


@dataclass(frozen=True)
class Duration(Quantity):
    """A length of time; a constrained :class:`Quantity`."""


@dataclass(frozen=True)
class Ratio:
    numerator: Quantity | None = None
    denominator: Quantity | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Range:
    low: Quantity | None = None
    high: Quantity | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class TimingRepeat:
    bounds: Union[Duration, Range, Period, None] = None
    count: int | None = None
    count_max: int | None = None
    duration: Decimal | float | None = None
    duration_max: Decimal | float | None = None
    duration_unit: Code | None = None
    frequency: int | None = None
    frequency_max: int | None = None
    period: Decimal | float | None = None
    period_max: Decimal | float | None = None
    period_unit: Code | None = None
    day_of_week: tuple[Code, ...] = ()
    time_of_day: tuple[str, ...] = ()
    when: tuple[Code, ...] = ()
    offset: int | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Timing:
    event: tuple[str, ...] = ()
    repeat: TimingRepeat | None = None
    code: CodeableConcept | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class DoseAndRate:
    type: CodeableConcept | None = None
    dose: Union[Range, Quantity, None] = None
    rate: Union[Ratio, Range, Quantity, None] = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Dosage:
    sequence: int | None = None
    text: str | None = None
    additional_instruction: tuple[CodeableConcept, ...] = ()
    patient_instruction: str | None = None
    timing: Timing | None = None
    as_needed: Union[bool, CodeableConcept, None] = None
    site: CodeableConcept | None = None
    route: CodeableConcept | None = None
    method: CodeableConcept | None = None
    dose_and_rate: tuple[DoseAndRate, ...] = ()
    max_dose_per_period: Ratio | None = None
    max_dose_per_administration: Quantity | None = None
    max_dose_per_lifetime: Quantity | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
    modifier_extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class HumanName:
    use: Code | None = None
    text: str | None = None
    family: str | None = None
    given: tuple[str, ...] = ()
    prefix: tuple[str, ...] = ()
    suffix: tuple[str, ...] = ()
    period: Period | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Identifier:
    use: Code | None = None
    type: CodeableConcept | None = None
    system: str | None = None
    value: str | None = None
    period: Period | None = None
    assigner: Reference | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Reference:
    """A reference to another resource.

    ``reference`` holds a literal reference (``"Patient/123"``), a
    contained anchor (``"#abc"``) or an absolute URL; ``identifier``
    holds a logical reference; ``display`` alone is a display-only
    reference.
    """

    reference: str | None = None
    type: Uri | None = None
    identifier: Identifier | None = None
    display: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class ContactPoint:
    system: Code | None = None
    value: str | None = None
    use: Code | None = None
    rank: int | None = None
    period: Period | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Address:
    use: Code | None = None
    type: Code | None = None
    text: str | None = None
    line: tuple[str, ...] = ()
    city: str | None = None
    district: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    period: Period | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Attachment:
    content_type: Code | None = None
    language: Code | None = None
    data: str | None = None
    url: str | None = None
    size: int | None = None
    hash: str | None = None
    title: str | None = None
    creation: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Narrative:
    status: Code | None = None
    div: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Meta:
    """Resource metadata.  ``version_id`` is never tenant-scoped."""

    version_id: str | None = None
    last_updated: str | None = None
    source: str | None = None
    profile: tuple[str, ...] = ()
    security: tuple[Coding, ...] = ()
    tag: tuple[Coding, ...] = ()
    id: str | None = None
    extension: tuple[Extension, ...] = ()


@dataclass(frozen=True)
class Annotation:
    author: Union[Reference, str, None] = None
    time: str | None = None
    text: str | None = None
    id: str | None = None
    extension: tuple[Extension, ...] = ()
