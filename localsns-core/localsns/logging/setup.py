import logging
import sys
import warnings

from localsns import config

from .format import DefaultFormatter

# third-party loggers which are too chatty on the root level
default_log_levels = {
    "requests": logging.WARNING,
    "rolo": logging.WARNING,
    "urllib3": logging.WARNING,
    "werkzeug": logging.WARNING,
}

# loggers opened up with LS_LOG=trace
trace_log_levels = {
    "rolo": logging.DEBUG,
    "werkzeug": logging.INFO,
    "localsns.request": logging.DEBUG,
}


def get_log_level_from_config() -> int:
    """LS_LOG wins over DEBUG, trace is logged on the debug level."""
    if not config.LS_LOG:
        return logging.DEBUG if config.DEBUG else logging.INFO
    if config.is_trace_logging_enabled():
        return logging.DEBUG
    return logging.getLevelName(config.LS_LOG.upper())


def setup_logging(log_level: int = logging.INFO, formatter: logging.Formatter = None) -> None:
    """
    Replaces the handlers of the root logger with a single stderr handler and sets the levels of the localsns
    and third-party loggers.

    :param log_level: the level of the root and localsns loggers
    :param formatter: the formatter of the handler, ``DefaultFormatter`` if not set
    """
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(formatter or DefaultFormatter())
    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    warnings.filterwarnings("ignore")
    logging.captureWarnings(True)

    logging.getLogger("localsns").setLevel(log_level)
    for name, level in default_log_levels.items():
        logging.getLogger(name).setLevel(level)


def setup_logging_from_config() -> None:
    setup_logging(get_log_level_from_config())
    if config.is_trace_logging_enabled():
        for name, level in trace_log_levels.items():
            logging.getLogger(name).setLevel(level)


def setup_logging_for_cli(log_level: int = logging.INFO) -> None:
    setup_logging(log_level, formatter=logging.Formatter("%(levelname)s %(name)s: %(message)s"))
