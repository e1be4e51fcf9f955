"""
Tests for short prefixed ids.
"""

import pytest

from curation_graph.utils.id_generator import (
    generate_id,
    generate_client_id,
    generate_quote_id,
    validate_id,
    get_id_type,
)


@pytest.mark.parametrize("node_type,prefix", [
    ('client', 'cl_'),
    ('report', 'rp_'),
    ('entity', 'en_'),
    ('source', 'sr_'),
    ('quote', 'qt_'),
])
def test_generate_id_prefix(node_type, prefix):
    node_id = generate_id(node_type)
    assert node_id.startswith(prefix)
    assert len(node_id) == 11
    assert validate_id(node_id)
    assert get_id_type(node_id) == node_type


def test_generate_id_rejects_unknown_type():
    with pytest.raises(ValueError):
        generate_id('event')


def test_ids_are_unique():
    ids = {generate_quote_id() for _ in range(1000)}
    assert len(ids) == 1000


@pytest.mark.parametrize("value", [None, '', 'cl_123', 'xx_abcdefgh', 'cl_ABCDEFGH', 42])
def test_validate_id_rejects(value):
    assert not validate_id(value)
    assert get_id_type(value) is None


def test_client_id_helper():
    assert get_id_type(generate_client_id()) == 'client'
