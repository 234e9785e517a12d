from .extension import (
    Extension as Extension,
    ExtensionKind as ExtensionKind,
)
from .control_message_filter import (
    CONTROL_MARKER as CONTROL_MARKER,
    ControlMessageFilter as ControlMessageFilter,
)
from .multi_handler import MultiHandler as MultiHandler
