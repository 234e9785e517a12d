from .context import (
    Context as Context,
    copy_or_share as copy_or_share,
)
