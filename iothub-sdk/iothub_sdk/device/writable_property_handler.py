# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the coordinator for writable property requests.

Each writable property (per component) moves through the following states:

    IDLE -> PENDING (ack 202) -> TERMINAL (ack 200, 400 or 404)

A request whose value cannot be decoded goes straight from IDLE to TERMINAL with a
400 ack. Both acks of an exchange carry the version of the desired property set
that triggered it.
"""

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, Tuple
from iothub_sdk.custom_typing import PropertyPatch, ReportFunction
from .convention import AckCode, PayloadConvention, default_payload_convention
from .properties import DesiredPropertySet, desired_set_from_patch

logger = logging.getLogger(__name__)


class PropertyExchangeState(enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    TERMINAL = "terminal"


class PropertyUpdateResult(NamedTuple):
    """The outcome of applying a writable property value on the device

    :ivar int ack_code: One of the terminal ack codes (200, 400, 404)
    :ivar str ack_description: Optional description to include in the ack
    """

    ack_code: int = AckCode.COMPLETED
    ack_description: Optional[str] = None


class PropertyStatus(NamedTuple):
    state: PropertyExchangeState
    ack_code: Optional[int] = None
    ack_version: Optional[int] = None


PropertyUpdateCallback = Callable[[Any], Awaitable[PropertyUpdateResult]]
PropertyValueConverter = Callable[[Any], Any]

_PropertyKey = Tuple[Optional[str], str]


class _Registration:
    def __init__(
        self,
        on_update: PropertyUpdateCallback,
        converter: Optional[PropertyValueConverter],
        in_progress_description: Optional[str],
    ) -> None:
        self.on_update = on_update
        self.converter = converter
        self.in_progress_description = in_progress_description
        self.status = PropertyStatus(state=PropertyExchangeState.IDLE)
        # Result of a PENDING exchange whose terminal ack has not been sent yet
        self.pending_result: Optional[PropertyUpdateResult] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def lock(self) -> asyncio.Lock:
        # Created on first use, inside the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock


class WritablePropertyHandler:
    """Coordinates the acknowledgement of writable property requests.

    Acks are sent by awaiting the provided report coroutine function with a reported
    property patch. Requests for different properties are handled concurrently, while
    requests for the same property are handled one at a time, in order.
    """

    def __init__(
        self,
        report: ReportFunction,
        convention: PayloadConvention = default_payload_convention,
    ) -> None:
        """Initializer for WritablePropertyHandler

        :param report: Coroutine function that sends a reported property patch to IoTHub
        :param convention: The payload convention used to build acks
        """
        self._report = report
        self._convention = convention
        self._registrations: Dict[_PropertyKey, _Registration] = {}

    def register(
        self,
        property_name: str,
        on_update: PropertyUpdateCallback,
        component_name: Optional[str] = None,
        converter: Optional[PropertyValueConverter] = None,
        in_progress_description: Optional[str] = None,
    ) -> None:
        """Register a coroutine function to apply new values of a writable property.

        :param str property_name: The name of the property
        :param on_update: Coroutine function taking the new value, returning a PropertyUpdateResult
        :param str component_name: The name of the component containing the property, if any
        :param converter: Optional function used to decode the raw value. If it raises
            any exception, the request is acknowledged as a bad request.
        :param str in_progress_description: Optional description for the in-progress ack
        :raises: ValueError if the property is already registered
        """
        key = (component_name or None, property_name)
        if key in self._registrations:
            raise ValueError(
                "Property '{}' on component '{}' is already registered".format(
                    property_name, component_name
                )
            )
        self._registrations[key] = _Registration(on_update, converter, in_progress_description)

    def get_status(self, property_name: str, component_name: Optional[str] = None) -> PropertyStatus:
        """Return the status of the most recent exchange for a property

        :raises: KeyError if the property is not registered
        """
        return self._registrations[(component_name or None, property_name)].status

    async def handle_desired_patch(self, patch: PropertyPatch) -> None:
        """Handle a desired property patch (`dict` including `$version`)"""
        await self.handle_desired_properties(desired_set_from_patch(patch))

    async def handle_desired_properties(self, desired: DesiredPropertySet) -> None:
        """Handle every registered property contained in a DesiredPropertySet.

        Unregistered properties are ignored.

        :raises: The first error raised by the report function, after all properties are handled
        """
        coros = []
        for (component_name, property_name), registration in self._registrations.items():
            found, raw_value = self._convention.try_get_property(
                desired.entries, property_name, component_name
            )
            if found:
                coros.append(
                    self._handle_property(
                        registration, desired.version, property_name, component_name, raw_value
                    )
                )
        if not coros:
            logger.debug("No registered properties in desired property set v{}".format(desired.version))
            return

        results: List[Any] = await asyncio.gather(*coros, return_exceptions=True)
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            raise errors[0]

    async def _handle_property(
        self,
        registration: _Registration,
        version: int,
        property_name: str,
        component_name: Optional[str],
        raw_value: Any,
    ) -> None:
        async with registration.lock:
            status = registration.status
            if status.ack_version is not None:
                if version < status.ack_version or (
                    version == status.ack_version
                    and status.state is PropertyExchangeState.TERMINAL
                ):
                    logger.debug(
                        "Ignoring stale request for property '{}' (v{}, last acked v{})".format(
                            property_name, version, status.ack_version
                        )
                    )
                    return
                if version == status.ack_version and registration.pending_result is not None:
                    # The terminal ack of this exchange was never delivered
                    logger.info(
                        "Resuming pending exchange for property '{}' (v{})".format(
                            property_name, version
                        )
                    )
                    await self._send_terminal_ack(
                        registration, property_name, component_name, raw_value, version
                    )
                    return

            try:
                value = registration.converter(raw_value) if registration.converter else raw_value
            except Exception as e:
                logger.error(
                    "Unable to decode value for property '{}': {}".format(property_name, e)
                )
                await self._send_ack(
                    registration,
                    property_name,
                    component_name,
                    raw_value,
                    AckCode.BAD_REQUEST,
                    version,
                    "Invalid value",
                )
                return

            registration.pending_result = None
            await self._send_ack(
                registration,
                property_name,
                component_name,
                raw_value,
                AckCode.IN_PROGRESS,
                version,
                registration.in_progress_description,
            )

            try:
                result = await registration.on_update(value)
                if not isinstance(result, PropertyUpdateResult):
                    raise TypeError("Update handler must return a PropertyUpdateResult")
            except Exception as e:
                logger.error(
                    "Update handler for property '{}' raised an exception".format(property_name),
                    exc_info=True,
                )
                result = PropertyUpdateResult(ack_code=AckCode.BAD_REQUEST, ack_description=str(e))

            if result.ack_code not in AckCode.TERMINAL:
                logger.warning(
                    "Update handler for property '{}' returned non-terminal ack code {}".format(
                        property_name, result.ack_code
                    )
                )
                result = PropertyUpdateResult(
                    ack_code=AckCode.BAD_REQUEST, ack_description=result.ack_description
                )

            registration.pending_result = result
            await self._send_terminal_ack(
                registration, property_name, component_name, raw_value, version
            )

    async def _send_terminal_ack(
        self,
        registration: _Registration,
        property_name: str,
        component_name: Optional[str],
        value: Any,
        ack_version: int,
    ) -> None:
        result = registration.pending_result
        await self._send_ack(
            registration,
            property_name,
            component_name,
            value,
            result.ack_code,
            ack_version,
            result.ack_description,
        )
        registration.pending_result = None

    async def _send_ack(
        self,
        registration: _Registration,
        property_name: str,
        component_name: Optional[str],
        value: Any,
        ack_code: int,
        ack_version: int,
        ack_description: Optional[str],
    ) -> None:
        patch = self._convention.build_ack(
            property_name=property_name,
            value=value,
            ack_code=ack_code,
            ack_version=ack_version,
            ack_description=ack_description,
            component_name=component_name,
        )
        await self._report(patch)
        state = (
            PropertyExchangeState.PENDING
            if ack_code == AckCode.IN_PROGRESS
            else PropertyExchangeState.TERMINAL
        )
        registration.status = PropertyStatus(state=state, ack_code=ack_code, ack_version=ack_version)
        logger.info(
            "Property '{}' is {} (ac={}, av={})".format(
                property_name, state.value, ack_code, ack_version
            )
        )
