from .env import Env as Env, load_env as load_env
from .exceptions import (
    AddressValidationError as AddressValidationError,
    HandlerNotFoundError as HandlerNotFoundError,
    MultiHandlerNotInstalledError as MultiHandlerNotInstalledError,
    ServerNotStartedError as ServerNotStartedError,
    SwitchboardError as SwitchboardError,
    WorkerRangeError as WorkerRangeError,
)
from .server import (
    Context as Context,
    ControlMessageFilter as ControlMessageFilter,
    Extension as Extension,
    ExtensionKind as ExtensionKind,
    Handler as Handler,
    MultiHandler as MultiHandler,
    NamedHandler as NamedHandler,
    Registry as Registry,
    RegistryBuilder as RegistryBuilder,
    UDPConnection as UDPConnection,
    UDPServer as UDPServer,
    WorkerRange as WorkerRange,
    handler as handler,
    remove_handler as remove_handler,
    respond as respond,
    run as run,
    send as send,
    set_handler as set_handler,
    start as start,
)
