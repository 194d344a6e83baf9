from inspect import getfile, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


MAX_CONTENT_LENGTH = 500
_MASKED = '********'
_SENSITIVE_PAIR = re.compile(
    r"""(['"]?)(""" + '|'.join(SENSITIVE_KEYWORDS) + r""")(['"]?\s*[:=]\s*)(['"]?)[^,'"\s}]+""",
    re.IGNORECASE,
)


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    target = getattr(func, '__func__', func)
    try:
        lineno = getsourcelines(target)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(target))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = call_depth_var.get() - 1
    call_depth_var.set(layer)
    if not layer:
        chain_start_time_var.set(0)


def mask_sensitive(data: Any) -> Any:
    """Mask `key=value` / `"key": "value"` pairs whose key looks sensitive."""
    text = str(data)
    masked = _SENSITIVE_PAIR.sub(lambda m: f'{m[1]}{m[2]}{m[3]}{m[4]}{_MASKED}', text)
    return data if masked == text else masked


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    return _MASKED if str(keyword).lower() in SENSITIVE_KEYWORDS else value


def truncate_content(data: Any) -> Any:
    text = str(data)
    if len(text) <= MAX_CONTENT_LENGTH:
        return data
    return f'{text[:MAX_CONTENT_LENGTH]}...(+{len(text) - MAX_CONTENT_LENGTH} chars)'
