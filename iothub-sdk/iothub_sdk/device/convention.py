# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the Plug and Play payload convention: the rules for nesting
properties inside components, and for acknowledging writable property requests.
"""

import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple
from iothub_sdk import constant
from iothub_sdk.custom_typing import PropertyPatch
from .serializer import ObjectSerializer, JsonSerializer

logger = logging.getLogger(__name__)


class AckCode:
    """Status codes used to acknowledge a writable property request"""

    COMPLETED = 200
    IN_PROGRESS = 202
    BAD_REQUEST = 400
    NOT_FOUND = 404

    TERMINAL = (COMPLETED, BAD_REQUEST, NOT_FOUND)


class AckSchema(NamedTuple):
    """The key names used inside a writable property acknowledgement"""

    value: str
    ack_code: str
    ack_version: str
    ack_description: str


TWIN_COLLECTION_ACK_SCHEMA = AckSchema(value="value", ack_code="ac", ack_version="av", ack_description="ad")
STRUCTURED_ACK_SCHEMA = AckSchema(
    value="value", ack_code="ackCode", ack_version="ackVersion", ack_description="ackDescription"
)


class WritablePropertyAck:
    """An acknowledgement of a writable property request.

    :ivar value: The value of the property being acknowledged
    :ivar int ack_code: HTTP-like status of the request (see AckCode)
    :ivar int ack_version: The version of the desired property set that is being acknowledged
    :ivar str ack_description: Optional human-readable description
    """

    __slots__ = ("_value", "_ack_code", "_ack_version", "_ack_description")

    def __init__(
        self, value: Any, ack_code: int, ack_version: int, ack_description: Optional[str] = None
    ) -> None:
        if not isinstance(ack_code, int) or isinstance(ack_code, bool):
            raise TypeError("ack_code must be an int")
        if not isinstance(ack_version, int) or isinstance(ack_version, bool):
            raise TypeError("ack_version must be an int")
        self._value = value
        self._ack_code = ack_code
        self._ack_version = ack_version
        self._ack_description = ack_description

    @property
    def value(self) -> Any:
        return self._value

    @property
    def ack_code(self) -> int:
        return self._ack_code

    @property
    def ack_version(self) -> int:
        return self._ack_version

    @property
    def ack_description(self) -> Optional[str]:
        return self._ack_description

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WritablePropertyAck):
            return NotImplemented
        return (self._value, self._ack_code, self._ack_version, self._ack_description) == (
            other._value,
            other._ack_code,
            other._ack_version,
            other._ack_description,
        )

    def __repr__(self) -> str:
        return "WritablePropertyAck(value={!r}, ack_code={}, ack_version={}, ack_description={!r})".format(
            self._value, self._ack_code, self._ack_version, self._ack_description
        )

    def to_dict(self, schema: AckSchema = TWIN_COLLECTION_ACK_SCHEMA) -> Dict[str, Any]:
        """Return the wire representation of this ack using the given key schema.
        The description is omitted when empty.
        """
        d = {
            schema.value: self._value,
            schema.ack_code: self._ack_code,
            schema.ack_version: self._ack_version,
        }
        if self._ack_description:
            d[schema.ack_description] = self._ack_description
        return d


class PayloadConvention:
    """The rules for encoding and decoding Plug and Play property and telemetry payloads.

    A convention is fixed at construction: it uses exactly one serializer and exactly
    one ack key schema for its whole lifetime.
    """

    def __init__(
        self,
        serializer: Optional[ObjectSerializer] = None,
        ack_schema: AckSchema = TWIN_COLLECTION_ACK_SCHEMA,
    ) -> None:
        """Initializer for PayloadConvention

        :param serializer: The serializer used for payloads (default JsonSerializer)
        :type serializer: :class:`ObjectSerializer`
        :param ack_schema: The key names for writable property acks (default value/ac/av/ad)
        :type ack_schema: :class:`AckSchema`
        """
        self._serializer = serializer if serializer is not None else JsonSerializer()
        self._ack_schema = ack_schema

    @property
    def serializer(self) -> ObjectSerializer:
        return self._serializer

    @property
    def ack_schema(self) -> AckSchema:
        return self._ack_schema

    @property
    def content_type(self) -> str:
        return self._serializer.content_type

    @property
    def content_encoding(self) -> str:
        return self._serializer.content_encoding

    def try_get_property(
        self,
        patch: Optional[Mapping[str, Any]],
        property_name: str,
        component_name: Optional[str] = None,
    ) -> Tuple[bool, Any]:
        """Look up a property in a twin-collection shaped patch.

        :param patch: The patch to search
        :param str property_name: The name of the property
        :param str component_name: The name of the component containing the property, if any
        :returns: A tuple (found, value). value is None if the property was not found.
        :raises: ValueError if patch is None
        """
        if patch is None:
            raise ValueError("patch cannot be None")

        if component_name:
            component = patch.get(component_name)
            if not isinstance(component, Mapping):
                return (False, None)
            container: Mapping[str, Any] = component
        else:
            container = patch

        if property_name in container:
            return (True, container[property_name])
        return (False, None)

    def build_ack(
        self,
        property_name: str,
        value: Any,
        ack_code: int,
        ack_version: int,
        ack_description: Optional[str] = None,
        component_name: Optional[str] = None,
    ) -> PropertyPatch:
        """Build a reported property patch acknowledging a writable property request

        :param str property_name: The name of the property
        :param value: The value being acknowledged
        :param int ack_code: HTTP-like status of the request (see AckCode)
        :param int ack_version: The version of the desired property set being acknowledged
        :param str ack_description: Optional description of the acknowledgement
        :param str component_name: The name of the component containing the property, if any
        :returns: The patch, with a component marker if a component was given
        """
        ack = WritablePropertyAck(
            value=value,
            ack_code=ack_code,
            ack_version=ack_version,
            ack_description=ack_description,
        )
        return self.build_ack_from(ack, property_name, component_name)

    def build_ack_from(
        self, ack: WritablePropertyAck, property_name: str, component_name: Optional[str] = None
    ) -> PropertyPatch:
        """Build a reported property patch from an existing WritablePropertyAck"""
        return _nest(property_name, ack.to_dict(self._ack_schema), component_name)

    def build_initial_report(
        self, property_name: str, value: Any, component_name: Optional[str] = None
    ) -> PropertyPatch:
        """Build a reported property patch for a property value, with no ack envelope"""
        return _nest(property_name, value, component_name)

    def parse_ack(self, ack_dict: Mapping[str, Any]) -> WritablePropertyAck:
        """Convert the wire representation of an ack back into a WritablePropertyAck

        :raises: ValueError if the ack is missing required keys
        """
        schema = self._ack_schema
        try:
            return WritablePropertyAck(
                value=ack_dict.get(schema.value),
                ack_code=ack_dict[schema.ack_code],
                ack_version=ack_dict[schema.ack_version],
                ack_description=ack_dict.get(schema.ack_description),
            )
        except (KeyError, TypeError) as e:
            raise ValueError("Invalid writable property ack") from e

    def serialize(self, obj: Any) -> str:
        return self._serializer.serialize(obj)

    def deserialize(self, payload: Any) -> Any:
        return self._serializer.deserialize(payload)


def _nest(property_name: str, value: Any, component_name: Optional[str]) -> PropertyPatch:
    if not property_name:
        raise ValueError("property_name must be a non-empty string")
    if component_name:
        return {
            component_name: {
                constant.COMPONENT_IDENTIFIER_KEY: constant.COMPONENT_IDENTIFIER_VALUE,
                property_name: value,
            }
        }
    return {property_name: value}


default_payload_convention = PayloadConvention()
