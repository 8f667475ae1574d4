"""Formatting of localsns log lines."""
import logging
from functools import lru_cache

MAX_THREAD_NAME_LEN = 12
MAX_NAME_LEN = 26

LOG_FORMAT = (
    "%(asctime)s.%(msecs)03d %(ls_level)5s --- [%(ls_thread)12s] %(ls_name)-26s : %(message)s"
)
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

SHORT_LEVEL_NAMES = {logging.WARNING: "WARN", logging.CRITICAL: "FATAL"}


class DefaultFormatter(logging.Formatter):
    """
    Formats records with ``LOG_FORMAT``. The level name is cut to at most five characters, the thread name to
    its tail (``sns_pub_3`` instead of ``ThreadPoolExecutor-0_sns_pub_3``), and the logger name is compressed
    with ``compress_logger_name``.
    """

    def __init__(self, max_name_len: int = MAX_NAME_LEN, max_thread_len: int = MAX_THREAD_NAME_LEN):
        super().__init__(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        self.max_name_len = max_name_len
        self.max_thread_len = max_thread_len

    def format(self, record: logging.LogRecord) -> str:
        record.ls_level = SHORT_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.ls_thread = record.threadName[-self.max_thread_len :]
        record.ls_name = compress_logger_name(record.name, self.max_name_len)
        return super().format(record)


@lru_cache(maxsize=256)
def compress_logger_name(name: str, length: int) -> str:
    """
    Abbreviates the leading parts of a dotted logger name to their first letter, from left to right, until the
    name fits. If even ``l.s.s.publisher`` is too long, only its last ``length`` characters are kept.

    >>> compress_logger_name("localsns.services.sns.publisher", 20)
    'l.s.sns.publisher'
    """
    parts = name.split(".")
    for i in range(len(parts) - 1):
        if len(".".join(parts)) <= length:
            break
        parts[i] = parts[i][0]
    compressed = ".".join(parts)
    return compressed if len(compressed) <= length else compressed[-length:]
