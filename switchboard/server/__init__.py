from .hooks import (
    Handler as Handler,
    HandlerCall as HandlerCall,
    NamedHandler as NamedHandler,
    handler as handler,
)
from .transport import (
    Address as Address,
    UDPTransport as UDPTransport,
    format_address as format_address,
    parse_address as parse_address,
    send as send,
)
from .context import Context as Context
from .extensions import (
    ControlMessageFilter as ControlMessageFilter,
    Extension as Extension,
    ExtensionKind as ExtensionKind,
    MultiHandler as MultiHandler,
)
from .connection import (
    OutputBuffer as OutputBuffer,
    UDPConnection as UDPConnection,
    remove_handler as remove_handler,
    respond as respond,
    set_handler as set_handler,
)
from .registry import (
    Pipeline as Pipeline,
    Registry as Registry,
    RegistryBuilder as RegistryBuilder,
)
from .workers import (
    SlotSelector as SlotSelector,
    WorkerPool as WorkerPool,
    WorkerRange as WorkerRange,
)
from .server import (
    ServerStatus as ServerStatus,
    UDPServer as UDPServer,
    run as run,
    start as start,
)
