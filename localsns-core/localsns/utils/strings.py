import uuid
from typing import Union

DEFAULT_ENCODING = "utf-8"


def to_str(obj: Union[str, bytes], encoding: str = DEFAULT_ENCODING) -> str:
    return obj.decode(encoding) if isinstance(obj, bytes) else obj


def to_bytes(obj: Union[str, bytes], encoding: str = DEFAULT_ENCODING) -> bytes:
    return obj.encode(encoding) if isinstance(obj, str) else obj


def truncate(data: str, max_length: int = 100) -> str:
    """Cuts ``data`` after ``max_length`` characters and marks the cut with ``...``."""
    data = str(data or "")
    if len(data) <= max_length:
        return data
    return f"{data[:max_length]}..."


def long_uid() -> str:
    return str(uuid.uuid4())
