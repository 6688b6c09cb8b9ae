# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the mechanisms used to sign IoTHub Shared Access Signatures"""

import abc
import base64
import binascii
import hmac
import hashlib
import urllib.parse
from typing import AnyStr, Optional


def get_string_to_sign(resource_uri: str, expiry: int) -> str:
    """Return the string IoTHub expects to be signed for a resource and expiry time

    :param str resource_uri: The (not yet URL encoded) URI of the resource
    :param int expiry: The expiry time, in seconds since the epoch
    """
    return urllib.parse.quote(resource_uri, safe="") + "\n" + str(expiry)


class SigningMechanism(abc.ABC):
    @abc.abstractmethod
    async def sign(self, data_str: AnyStr) -> str:
        # NOTE: This is a coroutine so that implementations may sign remotely (e.g. an HSM).
        pass

    @property
    def key_name(self) -> Optional[str]:
        """Name of the shared access policy the key belongs to, if any"""
        return None

    async def sign_resource(self, resource_uri: str, expiry: int) -> str:
        """Sign access to a resource until the given expiry time

        :returns: The signature (not URL encoded)
        """
        return await self.sign(get_string_to_sign(resource_uri, expiry))


class SymmetricKeySigningMechanism(SigningMechanism):
    def __init__(self, key: AnyStr, key_name: Optional[str] = None) -> None:
        """
        A mechanism that signs data using a symmetric key, such as a device key or the key of
        an IoTHub shared access policy

        :param key: Symmetric Key (base64 encoded)
        :type key: str or bytes
        :param str key_name: Name of the shared access policy, if the key belongs to one

        :raises: ValueError if provided key is invalid
        """
        if not key:
            raise ValueError("Symmetric Key cannot be empty")
        key_bytes = key.encode("utf-8") if isinstance(key, str) else key
        try:
            self._signing_key = base64.b64decode(key_bytes, validate=True)
        except binascii.Error:
            raise ValueError("Invalid Symmetric Key")
        self._key_name = key_name

    @property
    def key_name(self) -> Optional[str]:
        return self._key_name

    async def sign(self, data_str: AnyStr) -> str:
        """
        Sign a data string with symmetric key and the HMAC-SHA256 algorithm.

        :param data_str: Data string to be signed
        :type data_str: str or bytes

        :returns: The base64 encoded signature
        :rtype: str

        :raises: ValueError if an invalid data string is provided
        """
        data_bytes = data_str.encode("utf-8") if isinstance(data_str, str) else data_str
        try:
            hmac_digest = hmac.HMAC(
                key=self._signing_key, msg=data_bytes, digestmod=hashlib.sha256
            ).digest()
        except TypeError:
            raise ValueError("Unable to sign string using the provided symmetric key")
        return base64.b64encode(hmac_digest).decode("utf-8")
