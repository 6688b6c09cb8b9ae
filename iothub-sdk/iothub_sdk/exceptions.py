# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define client-side exceptions to be shared across the package.

Failures reported by IoT Hub are not defined here. Those are classified into a
single typed error, see :mod:`iothub_sdk.service.errors`.
"""


class IoTHubClientError(Exception):
    """Represents a local failure from an IoTHub client (no service classification)"""

    pass


class ResponseFormatError(IoTHubClientError):
    """A success response from IoTHub could not be deserialized.

    This is never transient. Retrying the same request will produce the same body.
    """

    pass


class SasTokenError(Exception):
    """Error in SasToken"""

    pass
