import inspect
import os
import sys
from typing import Any

from basestation.util import maybe


_src_root = ""  # pylint: disable=invalid-name


def set_src_root(path: str) -> None:
    """
    Set the directory prefix to strip from filenames in log message context.
    """
    global _src_root
    _src_root = os.path.abspath(path)
    if not _src_root.endswith("/"):
        _src_root += "/"


def log(*args: object, **kwargs: Any) -> None:
    """
    Log a message to stderr prefixed with the calling function's file, line and qualified name. The arguments to this
    function are passed directly to print().
    """
    kwargs.setdefault("file", sys.stderr)
    context = _caller_context()
    if context:
        print(context, *args, **kwargs)
    else:
        print(*args, **kwargs)


def _caller_context() -> str:
    # fmt: off
    frame    = maybe(lambda: inspect.stack()[4].frame                )
    caller   = maybe(lambda: inspect.getframeinfo(frame)             ) if frame  else None
    filename = maybe(lambda: caller.filename.removeprefix(_src_root) ) if caller else None
    lineno   = maybe(lambda: caller.lineno                           ) if caller else None
    qualname = maybe(lambda: frame.f_code.co_qualname                ) if frame  else None
    # fmt: on

    context = ""
    if filename and lineno is not None:
        context += f"{filename}:{lineno}:"
    if qualname:
        context += f"{qualname}:"
    return context
