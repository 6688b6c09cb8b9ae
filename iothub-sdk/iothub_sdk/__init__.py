"""IoTHub SDK

This library provides the Plug and Play device conventions (properties, components, commands
and telemetry) and clients for the IoTHub registry service.
"""

from .exceptions import IoTHubClientError, ResponseFormatError, SasTokenError  # noqa: F401
from .constant import VERSION as __version__  # noqa: F401
from . import device  # noqa: F401
from . import service  # noqa: F401
