# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the iothub-sdk package
"""

VERSION = "1.0.0b1"
IOTHUB_IDENTIFIER = "iothub-sdk-py"
IOTHUB_API_VERSION = "2021-04-12"

# Plug and Play conventions
COMPONENT_IDENTIFIER_KEY = "__t"
COMPONENT_IDENTIFIER_VALUE = "c"
VERSION_KEY = "$version"
TELEMETRY_COMPONENT_PROPERTY = "$.sub"
COMMAND_COMPONENT_SEPARATOR = "*"

# Registry
ETAG_WILDCARD = "*"
MAX_BULK_OPERATION_SIZE = 100

# Telemetry
TELEMETRY_MESSAGE_SIZE_LIMIT = 262144
