# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
from typing import Any, Dict, Optional, Union
from iothub_sdk import constant
from iothub_sdk.custom_typing import JSONSerializable
from .convention import PayloadConvention, default_payload_convention


class Message:
    """Represents a message to or from IoTHub

    :ivar payload: The data that constitutes the payload
    :ivar content_encoding: Content encoding of the message data. Can be 'utf-8', 'utf-16' or 'utf-32'
    :ivar content_type: Content type property used to route messages with the message-body. Can be 'application/json'
    :ivar message_id: A user-settable identifier for the message used for request-reply patterns.
    :ivar custom_properties: Dictionary of custom message properties. The keys and values of these properties will always be string.
    :ivar component_name: Name of the component the message was sent from, if any
    :ivar output_name: Name of the output that the message is being sent to.
    :ivar correlation_id: A property in a response message that typically contains the message_id of the request, in request-reply patterns
    """

    def __init__(
        self,
        payload: Union[str, JSONSerializable],
        content_encoding: str = "utf-8",
        content_type: str = "text/plain",
        output_name: Optional[str] = None,
    ) -> None:
        """
        Initializer for Message

        :param payload: The JSON serializable data that constitutes the payload.
        :param str content_encoding: Content encoding of the message payload.
            Acceptable values are 'utf-8', 'utf-16' and 'utf-32'
        :param str content_type: Content type of the message payload.
            Acceptable values are 'text/plain' and 'application/json'
        :param str output_name: Name of the output that the message is being sent to.
        """
        # Sanitize
        if content_encoding not in ["utf-8", "utf-16", "utf-32"]:
            raise ValueError(
                "Invalid content encoding. Supported codecs are 'utf-8', 'utf-16' and 'utf-32'"
            )
        if content_type not in ["text/plain", "application/json"]:
            raise ValueError(
                "Invalid content type. Supported types are 'text/plain' and 'application/json'"
            )

        self.payload = payload
        self.content_encoding = content_encoding
        self.content_type = content_type
        self.message_id: Optional[str] = None
        self.custom_properties: Dict[str, str] = {}
        self.output_name = output_name
        self.component_name: Optional[str] = None
        self.correlation_id: Optional[str] = None

    def __str__(self) -> str:
        return str(self.payload)

    def get_size(self) -> int:
        """Return the approximate size of the message on the wire, in bytes"""
        total = 0
        if isinstance(self.payload, bytes):
            total += len(self.payload)
        else:
            total += len(str(self.payload).encode(self.content_encoding))
        for key, value in self.get_system_properties_dict().items():
            total += len(key) + len(value)
        for key, value in self.custom_properties.items():
            total += len(key) + len(value)
        return total

    def get_system_properties_dict(self) -> Dict[str, str]:
        """Return a dictionary of system properties"""
        d = {}
        if self.message_id:
            d["$.mid"] = self.message_id
        if self.content_encoding:
            d["$.ce"] = self.content_encoding
        if self.content_type:
            d["$.ct"] = self.content_type
        if self.output_name:
            d["$.on"] = self.output_name
        if self.component_name:
            d[constant.TELEMETRY_COMPONENT_PROPERTY] = self.component_name
        if self.correlation_id:
            d["$.cid"] = self.correlation_id
        return d


def create_telemetry_message(
    telemetry_name: str,
    telemetry_value: Any,
    component_name: Optional[str] = None,
    convention: PayloadConvention = default_payload_convention,
) -> Message:
    """Create a telemetry Message following the Plug and Play convention.

    The payload is the serialized mapping {telemetry_name: telemetry_value}, and the
    component name (if any) is carried as a system property rather than in the payload.

    :param str telemetry_name: The name of the telemetry
    :param telemetry_value: The value of the telemetry
    :param str component_name: The name of the component sending the telemetry, if any
    :param convention: The payload convention used to serialize the payload
    :returns: The telemetry Message
    :raises: ValueError if the serialized message exceeds the size limit
    """
    payload = convention.serialize({telemetry_name: telemetry_value})
    message = Message(
        payload,
        content_encoding=convention.content_encoding,
        content_type=convention.content_type,
    )
    if component_name:
        message.component_name = component_name
    if message.get_size() > constant.TELEMETRY_MESSAGE_SIZE_LIMIT:
        raise ValueError("Size of telemetry message can not exceed 256 KB.")
    return message
