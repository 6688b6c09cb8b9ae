# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the serializers used to encode and decode convention payloads.

Both serializers accept plain JSON values (dicts, lists, primitives) as well as msrest
models. A serializer created with a ``model_class`` deserializes payloads into instances
of that model.
"""

import abc
import json
import logging
from typing import Any, Optional, Type, Union
from msrest.exceptions import DeserializationError, SerializationError
from msrest.serialization import Model

logger = logging.getLogger(__name__)

CONTENT_TYPE_JSON = "application/json"
CONTENT_ENCODING_UTF8 = "utf-8"


class ObjectSerializer(abc.ABC):
    """Capability used by a PayloadConvention to turn values into text and back.

    :ivar str content_type: The content type of serialized payloads
    :ivar str content_encoding: The content encoding of serialized payloads
    """

    content_type: str = CONTENT_TYPE_JSON
    content_encoding: str = CONTENT_ENCODING_UTF8

    def __init__(self, model_class: Optional[Type[Model]] = None) -> None:
        """Initializer for ObjectSerializer

        :param model_class: Optional msrest model class that payloads are deserialized into
        """
        self.model_class = model_class

    @abc.abstractmethod
    def serialize(self, obj: Any) -> str:
        """Serialize an object to a string

        :raises: TypeError if the object cannot be serialized
        """
        pass

    def deserialize(self, payload: Union[str, bytes]) -> Any:
        """Deserialize a string (or encoded bytes) to an object

        :raises: ValueError if the payload cannot be deserialized
        """
        data = _json_loads(payload, self.content_encoding)
        if self.model_class is None:
            return data
        try:
            return self.model_class.deserialize(data)
        except DeserializationError as e:
            raise ValueError(
                "Payload cannot be deserialized to {}".format(self.model_class.__name__)
            ) from e


class JsonSerializer(ObjectSerializer):
    """JSON serializer that omits model attributes left at their default (None).

    Omitted attributes are restored to None when deserializing into the model. Plain
    dicts are emitted as they are, nulls included, since their keys have no default.
    This is the default serializer.
    """

    def serialize(self, obj: Any) -> str:
        return _json_dumps(obj, keep_nulls=False)


class JsonSerializerWithNulls(ObjectSerializer):
    """JSON serializer that always emits None-valued model attributes as null"""

    def serialize(self, obj: Any) -> str:
        return _json_dumps(obj, keep_nulls=True)


def _to_json_value(obj: Any, keep_nulls: bool) -> Any:
    if isinstance(obj, Model):
        data = obj.serialize()
        if keep_nulls:
            for attr_desc in obj._attribute_map.values():
                data.setdefault(attr_desc["key"], None)
        return data
    elif isinstance(obj, dict):
        return {k: _to_json_value(v, keep_nulls) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_to_json_value(v, keep_nulls) for v in obj]
    else:
        return obj


def _json_dumps(obj: Any, keep_nulls: bool) -> str:
    try:
        return json.dumps(_to_json_value(obj, keep_nulls))
    except (TypeError, ValueError, SerializationError) as e:
        raise TypeError("Object of type {} is not serializable".format(type(obj).__name__)) from e


def _json_loads(payload: Union[str, bytes], encoding: str) -> Any:
    if isinstance(payload, bytes):
        try:
            payload = payload.decode(encoding)
        except UnicodeDecodeError as e:
            raise ValueError("Payload is not valid {}".format(encoding)) from e
    if not isinstance(payload, str):
        raise ValueError("Payload must be str or bytes, not {}".format(type(payload).__name__))
    # NOTE: json.JSONDecodeError is a subclass of ValueError
    return json.loads(payload)
