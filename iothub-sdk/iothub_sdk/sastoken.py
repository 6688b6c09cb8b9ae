# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for working with Shared Access Signature (SAS) Tokens"""

import asyncio
import logging
import time
import urllib.parse
from typing import Dict, List, Optional
from .exceptions import SasTokenError
from .signing_mechanism import SigningMechanism

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_UPDATE_MARGIN: int = 120
REQUIRED_SASTOKEN_FIELDS: List[str] = ["sr", "sig", "se"]
TOKEN_FORMAT: str = "SharedAccessSignature sr={resource}&sig={signature}&se={expiry}"
TOKEN_FORMAT_WITH_KEY_NAME: str = TOKEN_FORMAT + "&skn={key_name}"


class SasToken:
    def __init__(self, sastoken_str: str) -> None:
        """Create a SasToken object from a SAS Token string
        :param str sastoken_str: The SAS Token string

        :raises: ValueError if SAS Token string is invalid
        """
        self._token_str: str = sastoken_str
        self._token_info: Dict[str, str] = _get_sastoken_info_from_string(sastoken_str)

    def __str__(self) -> str:
        return self._token_str

    @property
    def expiry_time(self) -> float:
        # NOTE: Time is typically expressed in float in Python, even though a
        # SAS Token expiry time should be a whole number.
        return float(self._token_info["se"])

    @property
    def resource_uri(self) -> str:
        uri = self._token_info["sr"]
        return urllib.parse.unquote(uri)

    @property
    def signature(self) -> str:
        signature = self._token_info["sig"]
        return urllib.parse.unquote(signature)

    @property
    def key_name(self) -> Optional[str]:
        return self._token_info.get("skn")


class SasTokenGenerator:
    def __init__(self, signing_mechanism: SigningMechanism, uri: str, ttl: int = 3600) -> None:
        """An object that can generate SasTokens using provided values

        When the signing mechanism belongs to a shared access policy, generated tokens name
        that policy (the 'skn' field).

        :param signing_mechanism: The signing mechanism that will be used to sign data
        :type signing mechanism: :class:`SigningMechanism`
        :param str uri: The URI of the resource you are generating a tokens to access
        :param int ttl: Time to live for generated tokens, in seconds (default 3600)
        """
        self.signing_mechanism = signing_mechanism
        self.uri = uri
        self.ttl = ttl

    async def generate_sastoken(self) -> SasToken:
        """Generate a new SasToken

        :raises: SasTokenError if the token cannot be generated
        """
        expiry_time = int(time.time()) + self.ttl
        try:
            signature = await self.signing_mechanism.sign_resource(self.uri, expiry_time)
        except Exception as e:
            # Because of variant signing mechanisms, we don't know what error might be raised.
            # So we catch all of them.
            raise SasTokenError("Unable to generate SasToken") from e
        token_values = {
            "resource": urllib.parse.quote(self.uri, safe=""),
            "signature": urllib.parse.quote(signature, safe=""),
            "expiry": str(expiry_time),
        }
        key_name = self.signing_mechanism.key_name
        if key_name:
            token_str = TOKEN_FORMAT_WITH_KEY_NAME.format(
                key_name=urllib.parse.quote(key_name, safe=""), **token_values
            )
        else:
            token_str = TOKEN_FORMAT.format(**token_values)
        return SasToken(token_str)


class SasTokenProvider:
    def __init__(self, generator: SasTokenGenerator) -> None:
        """Object responsible for providing a valid SasToken.

        Tokens are generated lazily, and regenerated once the current token is within
        the update margin of its expiry.

        :param generator: A SasTokenGenerator to generate SasTokens with
        :type generator: SasTokenGenerator
        """
        self._generator = generator
        self._sastoken: Optional[SasToken] = None
        self._token_update_margin = DEFAULT_TOKEN_UPDATE_MARGIN
        self._lock = asyncio.Lock()

    async def get_current_sastoken(self) -> SasToken:
        """Return a SasToken that is not within the update margin of expiring

        :raises: SasTokenError if a new SasToken cannot be generated
        """
        async with self._lock:
            if (
                self._sastoken is None
                or self._sastoken.expiry_time - self._token_update_margin <= time.time()
            ):
                logger.debug("Generating new SAS Token...")
                self._sastoken = await self._generator.generate_sastoken()
                logger.debug("SAS Token generation succeeded")
            return self._sastoken


def _get_sastoken_info_from_string(sastoken_string: str) -> Dict[str, str]:
    pieces = sastoken_string.split("SharedAccessSignature ")
    if len(pieces) != 2:
        raise ValueError("Invalid SAS Token string: Not a SAS Token ")

    # Get sastoken info as dictionary
    try:
        sastoken_info = dict(map(str.strip, sub.split("=", 1)) for sub in pieces[1].split("&"))  # type: ignore
    except Exception as e:
        raise ValueError("Invalid SAS Token string: Incorrectly formatted") from e

    # Validate that all required fields are present
    if not all(key in sastoken_info for key in REQUIRED_SASTOKEN_FIELDS):
        raise ValueError("Invalid SAS Token string: Not all required fields present")

    # Warn if extraneous fields are present
    if not all(key in REQUIRED_SASTOKEN_FIELDS + ["skn"] for key in sastoken_info):
        logger.warning("Unexpected fields present in SAS Token")

    return sastoken_info
