# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains classes related to Digital Twin properties and components.
"""

import copy
import logging
import types
from typing import Any, Dict, Mapping, Optional, Tuple
import deprecation
from iothub_sdk import constant
from iothub_sdk.custom_typing import Twin, TwinPatch
from .convention import PayloadConvention, default_payload_convention

logger = logging.getLogger(__name__)


@deprecation.deprecated(
    deprecated_in="1.0.0b1",
    current_version=constant.VERSION,
    details="We recommend that you use PayloadConvention.build_ack instead",
)
def generate_writable_property_response(
    value: Any, ack_code: int, ack_description: Optional[str], ack_version: int
) -> Dict[str, Any]:
    return {
        "value": value,
        "ac": ack_code,
        "ad": ack_description,
        "av": ack_version,
    }


class DesiredPropertySet:
    """An immutable snapshot of a desired property patch.

    :ivar int version: The version of the desired properties
    :ivar entries: The properties (and components) contained in the patch
    """

    def __init__(self, version: int, entries: Mapping[str, Any]) -> None:
        if not isinstance(version, int) or isinstance(version, bool):
            raise TypeError("version must be an int")
        self._version = version
        self._entries = types.MappingProxyType(copy.deepcopy(dict(entries)))

    @property
    def version(self) -> int:
        return self._version

    @property
    def entries(self) -> Mapping[str, Any]:
        return self._entries

    def __repr__(self) -> str:
        return "DesiredPropertySet(version={}, entries={!r})".format(self._version, dict(self._entries))


class ClientPropertyCollection:
    """A set of properties (and components containing properties) as found in a twin.

    :ivar backing_object: The twin-collection shaped dictionary wrapped by this collection
    """

    def __init__(
        self,
        backing_object: Optional[TwinPatch] = None,
        convention: PayloadConvention = default_payload_convention,
    ) -> None:
        self.backing_object: TwinPatch = backing_object if backing_object is not None else {}
        self._convention = convention

    @property
    def version(self) -> Optional[int]:
        return self.backing_object.get(constant.VERSION_KEY)  # type: ignore

    def set_property(self, property_name: str, property_value: Any) -> None:
        self.backing_object[property_name] = property_value

    def get_property(self, property_name: str, default: Any = None) -> Any:
        return self.backing_object.get(property_name, default)

    def set_component_property(
        self, component_name: str, property_name: str, property_value: Any
    ) -> None:
        if component_name not in self.backing_object:
            self.backing_object[component_name] = {
                constant.COMPONENT_IDENTIFIER_KEY: constant.COMPONENT_IDENTIFIER_VALUE
            }
        self.backing_object[component_name][property_name] = property_value  # type: ignore

    def get_component_property(
        self, component_name: str, property_name: str, default: Any = None
    ) -> Any:
        found, value = self.try_get_value(property_name, component_name)
        return value if found else default

    def try_get_value(
        self, property_name: str, component_name: Optional[str] = None
    ) -> Tuple[bool, Any]:
        return self._convention.try_get_property(self.backing_object, property_name, component_name)

    def contains(self, property_name: str, component_name: Optional[str] = None) -> bool:
        found, _ = self.try_get_value(property_name, component_name)
        return found


class ClientProperties:
    def __init__(self, convention: PayloadConvention = default_payload_convention) -> None:
        self.writable_properties_requests = ClientPropertyCollection(convention=convention)
        self.reported_from_device = ClientPropertyCollection(convention=convention)


def twin_patch_to_client_property_collection(
    twin_patch: TwinPatch, convention: PayloadConvention = default_payload_convention
) -> ClientPropertyCollection:
    """Given a Twin Patch (`dict`), returns a `ClientPropertyCollection` object"""
    return ClientPropertyCollection(backing_object=twin_patch, convention=convention)


def twin_to_client_properties(
    twin: Twin, convention: PayloadConvention = default_payload_convention
) -> ClientProperties:
    """Given a Twin JSON, return a `ClientProperties` object"""
    obj = ClientProperties(convention=convention)
    obj.reported_from_device.backing_object = twin["reported"]
    obj.writable_properties_requests.backing_object = twin["desired"]
    return obj


def client_property_collection_to_twin_patch(
    client_property_collection: ClientPropertyCollection,
) -> TwinPatch:
    """Given a `ClientPropertyCollection` object, return a twin patch (`dict`)"""
    return client_property_collection.backing_object


def desired_set_from_patch(patch: Mapping[str, Any]) -> DesiredPropertySet:
    """Given a desired property patch (`dict`), return a `DesiredPropertySet`.

    The `$version` key is removed from the entries and becomes the version.

    :raises: ValueError if the patch has no valid `$version`
    """
    entries = dict(patch)
    version = entries.pop(constant.VERSION_KEY, None)
    if not isinstance(version, int) or isinstance(version, bool):
        raise ValueError("Desired property patch does not contain a valid $version")
    return DesiredPropertySet(version=version, entries=entries)
