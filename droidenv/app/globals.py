# droidenv/app/globals.py
from __future__ import annotations
from typing import Any, cast, TYPE_CHECKING

from droidenv.app.context import PROCESS_REGISTRY
from droidenv.core.dictpath import getByPath
from droidenv.core.errors import UserContextError

if TYPE_CHECKING:
    from droidenv.environment.user_context import GlobalUserContext



def getUserContext() -> GlobalUserContext:
    """
    Returns the process-wide user context.

    Raises UserContextError until bootstrapUserContext() (or the first static
    accessor call) has registered one.
    """
    ctx = PROCESS_REGISTRY.get("user.context")
    if ctx is None:
        raise UserContextError(
            "No user context registered. Call bootstrapUserContext() "
            "before resolving per-user storage paths."
        )
    return cast("GlobalUserContext", ctx)



def hasUserContext() -> bool:
    return PROCESS_REGISTRY.get("user.context") is not None



def config(path: str, default: Any = None) -> Any:
    """
    Read a dotted path from the merged global configuration.

    Returns `default` when the path is not found.

    Example:
      value = config("logging.file")                       # returns None by default
      value = config("debug.suppressRecurringMessages.windowSeconds", 60)
    """
    from droidenv.app.config import getGlobalConfig
    snap = getGlobalConfig().snapshot()
    val = getByPath(snap["values"], path)
    return default if val is None else val



def configBool(path: str, default: bool = False) -> bool:
    """
    Read a boolean from the merged global configuration.
    """
    val = config(path, None)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    return bool(val)
