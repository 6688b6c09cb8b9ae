# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains classes related to Commands and the direct methods that carry them.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Union
from iothub_sdk import constant
from iothub_sdk.custom_typing import JSONSerializable
from .convention import PayloadConvention, default_payload_convention

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500


class MethodRequest:
    """Represents a request to invoke a direct method.

    :ivar str request_id: The request id.
    :ivar str name: The name of the method to be invoked.
    :ivar payload: The payload being sent with the request. Can be raw (str or bytes)
        JSON text, or an already decoded JSON compatible value.
    """

    def __init__(
        self, request_id: str, name: str, payload: Union[str, bytes, JSONSerializable]
    ) -> None:
        """Initializer for a MethodRequest.

        :param str request_id: The request id.
        :param str name: The name of the method to be invoked
        :param payload: The payload being sent with the request.
        """
        self.request_id = request_id
        self.name = name
        self.payload = payload


class MethodResponse:
    """Represents a response to a direct method.

    :ivar str request_id: The request id of the MethodRequest being responded to.
    :ivar int status: The status of the execution of the MethodRequest.
    :ivar payload: The JSON payload to be sent with the response.
    :type payload: dict, str, int, float, bool, or None (JSON compatible values)
    """

    def __init__(self, request_id: str, status: int, payload: JSONSerializable = None) -> None:
        self.request_id = request_id
        self.status = status
        self.payload = payload

    @classmethod
    def create_from_method_request(
        cls, method_request: MethodRequest, status: int, payload: JSONSerializable = None
    ) -> "MethodResponse":
        """Factory method for creating a MethodResponse from a MethodRequest."""
        return cls(request_id=method_request.request_id, status=status, payload=payload)


class CommandRequest:
    """Represents a request to invoke a Digital Twin command.

    :ivar str request_id: The request id.
    :ivar str component_name: The name of the component with the command to be invoked.
        Set to None if the command is on the root component.
    :ivar str command_name: The name of the command to be invoked.
    :ivar payload: The decoded payload being sent with the request.
    """

    def __init__(
        self,
        request_id: str,
        component_name: Optional[str],
        command_name: str,
        payload: Any,
    ) -> None:
        self._request_id = request_id
        self._component_name = component_name
        self._command_name = command_name
        self._payload = payload

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def component_name(self) -> Optional[str]:
        return self._component_name

    @property
    def command_name(self) -> str:
        return self._command_name

    @property
    def payload(self) -> Any:
        return self._payload


class CommandResponse:
    """Represents a response to a Digital Twin command.

    :ivar str request_id: The request id of the CommandRequest being responded to.
    :ivar int status: The status of the execution of the CommandRequest.
    :ivar payload: The JSON payload to be sent with the response.
    """

    def __init__(self, request_id: str, status: int, payload: JSONSerializable = None) -> None:
        self.request_id = request_id
        self.status = status
        self.payload = payload

    @classmethod
    def create_from_command_request(
        cls, command_request: CommandRequest, status: int, payload: JSONSerializable = None
    ) -> "CommandResponse":
        """Factory method for creating a CommandResponse from a CommandRequest."""
        return cls(request_id=command_request.request_id, status=status, payload=payload)


def split_method_name(method_name: str) -> Tuple[Optional[str], str]:
    """Split a direct method name into (component_name, command_name)"""
    tokens = method_name.split(constant.COMMAND_COMPONENT_SEPARATOR, 1)
    if len(tokens) > 1:
        return (tokens[0], tokens[1])
    return (None, tokens[0])


def method_request_to_command_request(method_request: MethodRequest) -> CommandRequest:
    """Given a MethodRequest, returns a CommandRequest"""
    component_name, command_name = split_method_name(method_request.name)
    return CommandRequest(
        request_id=method_request.request_id,
        component_name=component_name,
        command_name=command_name,
        payload=method_request.payload,
    )


def command_response_to_method_response(command_response: CommandResponse) -> MethodResponse:
    return MethodResponse(
        request_id=command_response.request_id,
        status=command_response.status,
        payload=command_response.payload,
    )


CommandHandler = Callable[[CommandRequest], Union[CommandResponse, Awaitable[CommandResponse]]]


class CommandDispatcher:
    """Routes direct method requests to registered command handlers.

    Dispatching never raises. Failures are reported in the returned MethodResponse:
    400 for a malformed payload, 404 for an unknown command, 500 for a handler failure.
    """

    def __init__(self, convention: PayloadConvention = default_payload_convention) -> None:
        self._convention = convention
        self._handlers: Dict[Tuple[Optional[str], str], CommandHandler] = {}

    def register(
        self, command_name: str, handler: CommandHandler, component_name: Optional[str] = None
    ) -> None:
        """Register a handler (function or coroutine function) for a command.

        :raises: ValueError if a handler is already registered for the command
        """
        key = (component_name or None, command_name)
        if key in self._handlers:
            raise ValueError(
                "A handler is already registered for command '{}' on component '{}'".format(
                    command_name, component_name
                )
            )
        self._handlers[key] = handler

    def unregister(self, command_name: str, component_name: Optional[str] = None) -> None:
        self._handlers.pop((component_name or None, command_name), None)

    async def dispatch(self, method_request: MethodRequest) -> MethodResponse:
        """Invoke the handler for a MethodRequest and return the MethodResponse to send"""
        component_name, command_name = split_method_name(method_request.name)
        handler = self._handlers.get((component_name, command_name))
        if handler is None:
            logger.warning(
                "No handler for command '{}' on component '{}'".format(command_name, component_name)
            )
            return MethodResponse.create_from_method_request(
                method_request,
                STATUS_NOT_FOUND,
                {"message": "Unknown command '{}'".format(method_request.name)},
            )

        try:
            payload = self._decode_payload(method_request.payload)
        except ValueError as e:
            logger.error("Malformed payload for command '{}': {}".format(method_request.name, e))
            return MethodResponse.create_from_method_request(
                method_request, STATUS_BAD_REQUEST, {"message": "Malformed payload"}
            )

        command_request = CommandRequest(
            request_id=method_request.request_id,
            component_name=component_name,
            command_name=command_name,
            payload=payload,
        )
        try:
            command_response = handler(command_request)
            if asyncio.iscoroutine(command_response):
                command_response = await command_response
            if not isinstance(command_response, CommandResponse):
                raise TypeError("Command handler must return a CommandResponse")
        except Exception:
            logger.error(
                "Handler for command '{}' raised an exception".format(method_request.name),
                exc_info=True,
            )
            return MethodResponse.create_from_method_request(
                method_request, STATUS_INTERNAL_ERROR, {"message": "Command handler failed"}
            )
        return command_response_to_method_response(command_response)

    def _decode_payload(self, payload: Any) -> Any:
        if isinstance(payload, (str, bytes)):
            if not payload:
                return None
            return self._convention.deserialize(payload)
        return payload
