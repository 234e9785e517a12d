from .handler import (
    Handler as Handler,
    HandlerCall as HandlerCall,
    NamedHandler as NamedHandler,
    handler as handler,
)
