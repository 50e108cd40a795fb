"""
Property-based tests for localization using Hypothesis.

Strategy: generate node trees from the coded-value and period shapes
(no ids, no references) to check identity preservation, and generate
literal references over the FHIR id alphabet to check the rewrite and
its lack of idempotence.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from fhir_tenancy.localization import DATA_AUTHORITY_EXTENSIONS, localize
from fhir_tenancy.model import (
    CodeableConcept,
    Coding,
    Extension,
    Id,
    Period,
    Reference,
    Uri,
)

# ═══════════════════════════════════════════════════════════════════
# Custom Hypothesis Strategies
# ═══════════════════════════════════════════════════════════════════

_tenants = st.from_regex(r"[a-z0-9]{1,10}", fullmatch=True)
_local_ids = st.from_regex(r"[A-Za-z0-9\-.]{1,40}", fullmatch=True)
_resource_types = st.sampled_from([
    "Patient", "Practitioner", "Location", "Encounter", "Organization",
])
_text = st.one_of(st.none(), st.text(max_size=12))

_scalar_extensions = st.builds(
    Extension,
    url=st.just("http://example.org/extension"),
    value=st.one_of(st.none(), st.text(max_size=8), st.booleans(), st.integers()),
)


@st.composite
def codings(draw):
    return Coding(
        system=draw(_text),
        code=draw(_text),
        display=draw(_text),
        extension=tuple(draw(st.lists(_scalar_extensions, max_size=2))),
    )


@st.composite
def codeable_concepts(draw):
    return CodeableConcept(
        coding=tuple(draw(st.lists(codings(), max_size=3))),
        text=draw(_text),
    )


_plain_nodes = st.one_of(
    codings(),
    codeable_concepts(),
    st.builds(Period, start=_text, end=_text),
    _scalar_extensions,
)


# ═══════════════════════════════════════════════════════════════════
# Properties
# ═══════════════════════════════════════════════════════════════════


class TestIdentityProperty:

    @given(node=_plain_nodes, tenant=_tenants)
    def test_plain_node_is_returned_as_is(self, node, tenant):
        assert localize(node, tenant) is node

    @given(nodes=st.lists(_plain_nodes, max_size=4), tenant=_tenants)
    def test_plain_tuple_is_returned_as_is(self, nodes, tenant):
        values = tuple(nodes)
        assert localize(values, tenant) is values


class TestReferenceRewriteProperty:

    @given(resource_type=_resource_types, local_id=_local_ids, tenant=_tenants)
    def test_literal_reference_rewritten(self, resource_type, local_id, tenant):
        localized = localize(Reference(reference=f"{resource_type}/{local_id}"), tenant)
        assert localized == Reference(
            reference=f"{resource_type}/{tenant}-{local_id}",
            type=Uri(resource_type, extension=DATA_AUTHORITY_EXTENSIONS),
        )

    @given(local_id=_local_ids, tenant=_tenants)
    def test_id_rewritten(self, local_id, tenant):
        assert localize(Id(local_id), tenant) == Id(f"{tenant}-{local_id}")


class TestRepeatedLocalizationProperty:

    @settings(max_examples=50)
    @given(resource_type=_resource_types, local_id=_local_ids, tenant=_tenants)
    def test_second_pass_prefixes_again(self, resource_type, local_id, tenant):
        reference = Reference(reference=f"{resource_type}/{local_id}")
        twice = localize(localize(reference, tenant), tenant)
        assert twice.reference == f"{resource_type}/{tenant}-{tenant}-{local_id}"

    @settings(max_examples=50)
    @given(local_id=_local_ids, tenant=_tenants)
    def test_id_second_pass_prefixes_again(self, local_id, tenant):
        twice = localize(localize(Id(local_id), tenant), tenant)
        assert twice.value == f"{tenant}-{tenant}-{local_id}"
