""" IoTHub Device Conventions

This package provides the Plug and Play conventions used by an IoT device: property and
component encoding, writable property acknowledgements, commands and telemetry.
"""

from .serializer import ObjectSerializer, JsonSerializer, JsonSerializerWithNulls  # noqa: F401
from .convention import (  # noqa: F401
    AckCode,
    AckSchema,
    PayloadConvention,
    WritablePropertyAck,
    TWIN_COLLECTION_ACK_SCHEMA,
    STRUCTURED_ACK_SCHEMA,
)
from .properties import (  # noqa: F401
    ClientProperties,
    ClientPropertyCollection,
    DesiredPropertySet,
    desired_set_from_patch,
    generate_writable_property_response,
    twin_to_client_properties,
)
from .commands import (  # noqa: F401
    CommandDispatcher,
    CommandRequest,
    CommandResponse,
    MethodRequest,
    MethodResponse,
)
from .telemetry import Message, create_telemetry_message  # noqa: F401
from .writable_property_handler import (  # noqa: F401
    PropertyExchangeState,
    PropertyUpdateResult,
    WritablePropertyHandler,
)
