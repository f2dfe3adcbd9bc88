import logging
from typing import Any, Dict
from time import perf_counter
from inspect import currentframe, getframeinfo

# pylint:disable = W0221

PACKAGE_LOGGER_NAME: str = "pyrmp"
"""Name of the logger that all pyrmp modules log to."""


class LoggingFormatter(logging.Formatter):
    """
    Custom logging formatter visually consistent with spdlog.
    """

    BOLD_RED: str = "\033[31;1m"
    BOLD_WHITE: str = "\033[37;1m"
    BOLD_YELLOW: str = "\033[33;1m"
    GREEN: str = "\033[32m"
    ON_RED: str = "\033[41m"
    RESET: str = "\033[0m"

    LEVEL_FORMAT: Dict[Any, str] = {
        logging.CRITICAL: f"[{ON_RED}{BOLD_WHITE}critical{RESET}]",
        logging.DEBUG: "[debug]",
        logging.ERROR: f"[{BOLD_RED}error{RESET}]",
        logging.INFO: f"[{GREEN}info{RESET}]",
        logging.WARNING: f"[{BOLD_YELLOW}warning{RESET}]",
    }

    def format(self, record):
        custom_format = (
            "[%(asctime)s] "
            + self.LEVEL_FORMAT.get(record.levelno, "[???]")
            + " [%(name)s] %(message)s (%(filename)s:%(lineno)d)"
        )
        formatter = logging.Formatter(custom_format)
        return formatter.format(record)


def _make_stream_handler() -> logging.StreamHandler:
    _handler = logging.StreamHandler()
    _handler.setLevel(logging.DEBUG)
    _handler.setFormatter(LoggingFormatter())
    return _handler


logger = logging.getLogger(PACKAGE_LOGGER_NAME)
logger.setLevel(logging.INFO)
if not logger.handlers:
    logger.addHandler(_make_stream_handler())
# records are formatted once, by the package handler
logger.propagate = False


def set_log_level(level: int | str) -> None:
    """Set the verbosity of all pyrmp loggers (e.g. `logging.DEBUG` to see the profile shape
    chosen by each planner).

    Args:
        level (int | str): Logging level, as accepted by `logging.Logger.setLevel`.
    """
    logger.setLevel(level)


class ThrottledLogger(logging.Logger):
    """Log data intermittently at specified frequency."""

    def __init__(self, name: str, rate: float, level: int | str = logging.NOTSET) -> None:
        super().__init__(name, level)
        self.parent = logger
        self.__period = 1.0 / rate
        self.__next_tick = perf_counter()

    def log(self, level, msg, *args, **kwargs):
        if self.__next_tick - perf_counter() <= 0.0:
            self.__next_tick = perf_counter() + self.__period
            super().log(level, msg, *args, **kwargs)


class _ThrottledLogging:
    # Keeps one ThrottledLogger per call site, so that a warning emitted every control tick is
    # only printed once every `delay_sec` seconds. Use directly as
    # `throttled_logging.<logtype>("message", delay_time_in_sec)`.

    _ACTIVE_THROTTLED_LOGGERS: Dict[str, ThrottledLogger] = {}

    @staticmethod
    def _get_triggered_logger(suffix: str, rate: float) -> ThrottledLogger:
        # two frames up: the caller of info()/warning()/...
        info = getframeinfo(currentframe().f_back.f_back)
        logger_name = f"{PACKAGE_LOGGER_NAME}.{info.filename}_{info.lineno}_{suffix}"
        if logger_name not in _ThrottledLogging._ACTIVE_THROTTLED_LOGGERS:
            _ThrottledLogging._ACTIVE_THROTTLED_LOGGERS[logger_name] = ThrottledLogger(
                name=logger_name, rate=rate
            )
        return _ThrottledLogging._ACTIVE_THROTTLED_LOGGERS[logger_name]

    @staticmethod
    def debug(msg, delay_sec, *args, **kwargs):
        _logger = _ThrottledLogging._get_triggered_logger("debug", rate=1.0 / delay_sec)
        _logger.log(logging.DEBUG, msg, *args, **kwargs)

    @staticmethod
    def info(msg, delay_sec, *args, **kwargs):
        _logger = _ThrottledLogging._get_triggered_logger("info", rate=1.0 / delay_sec)
        _logger.log(logging.INFO, msg, *args, **kwargs)

    @staticmethod
    def warning(msg, delay_sec, *args, **kwargs):
        _logger = _ThrottledLogging._get_triggered_logger("warning", rate=1.0 / delay_sec)
        _logger.log(logging.WARNING, msg, *args, **kwargs)


throttled_logging = _ThrottledLogging  # pylint:disable=C0103
"""Log data intermittently once every t seconds. Allows use directly as function call using
`throttled_logging.<logtype>("message", delay_time_in_sec)`"""

__all__ = ["logger", "set_log_level", "ThrottledLogger", "throttled_logging"]
