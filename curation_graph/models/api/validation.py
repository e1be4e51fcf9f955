"""
Translate pydantic failures into curation ValidationError.
"""
from typing import Any, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from curation_graph.errors import ValidationError

M = TypeVar('M', bound=BaseModel)


def parse_input(model_cls: Type[M], data: Union[M, Mapping[str, Any], None]) -> M:
    """
    Parse a mapping (or pass through an already-built model).

    Raises:
        ValidationError: naming the first offending field
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(dict(data or {}))
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = '.'.join(str(part) for part in first.get('loc', ())) or None
        message = first.get('msg', 'invalid value')
        # model-level validators report "Value error, <msg>"
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        raise ValidationError(field, message) from e
