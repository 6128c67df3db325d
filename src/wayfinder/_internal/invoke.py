"""Calling user collaborators from the dispatcher.

A page or API handler receives its path parameters (plus the request
when its signature asks for one), a layout receives the content and the
request path, and a metadata producer receives the parameters.  Any of
them may be a plain function or a coroutine function, so the dispatcher
routes every call through ``invoke`` and never checks which kind it has.

Usage::

    content = await invoke(route.handler, params)
    html = await invoke(layout.handler, content, path)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* with the given arguments, awaiting the result if needed.

    A handler may also be sync and return an awaitable, for example a
    ``functools.partial`` over an ``async def`` producer.
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
