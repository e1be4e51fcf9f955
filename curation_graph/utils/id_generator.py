"""
Node ids for the curation graph: two-letter kind prefix, underscore, eight
lowercase base36 characters (e.g. 'qt_4k9zq0ab'). Ids are opaque to the
graph; the prefix only helps humans and logs tell kinds apart.
"""
import re
import secrets
import string
from typing import Optional

SUFFIX_LENGTH = 8
_SUFFIX_CHARS = string.digits + string.ascii_lowercase

PREFIXES = {
    'client': 'cl',
    'report': 'rp',
    'entity': 'en',
    'source': 'sr',
    'quote': 'qt',
}
_KIND_BY_PREFIX = {prefix: kind for kind, prefix in PREFIXES.items()}

ID_PATTERN = re.compile(
    r'^(?P<prefix>%s)_[0-9a-z]{%d}$' % ('|'.join(PREFIXES.values()), SUFFIX_LENGTH)
)


def generate_id(node_type: str) -> str:
    """New random id for a node kind; ValueError on an unknown kind."""
    try:
        prefix = PREFIXES[node_type]
    except KeyError:
        raise ValueError(
            f"Unknown node type {node_type!r}, expected one of {sorted(PREFIXES)}"
        ) from None
    suffix = ''.join(secrets.choice(_SUFFIX_CHARS) for _ in range(SUFFIX_LENGTH))
    return f"{prefix}_{suffix}"


def get_id_type(id_str) -> Optional[str]:
    """Kind encoded in a well-formed id, else None."""
    if not isinstance(id_str, str):
        return None
    match = ID_PATTERN.match(id_str)
    return _KIND_BY_PREFIX[match.group('prefix')] if match else None


def validate_id(id_str) -> bool:
    return get_id_type(id_str) is not None


def generate_client_id() -> str:
    return generate_id('client')


def generate_report_id() -> str:
    return generate_id('report')


def generate_entity_id() -> str:
    return generate_id('entity')


def generate_source_id() -> str:
    return generate_id('source')


def generate_quote_id() -> str:
    return generate_id('quote')
