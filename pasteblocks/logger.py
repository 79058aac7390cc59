import logging
import os

DEFAULT_LOG_LEVEL = "WARNING"

logger = logging.getLogger("pasteblocks")
trace_logger = logging.getLogger("pasteblocks.trace")

# Create a custom logging level
DETAIL = 15
logging.addLevelName(DETAIL, "DETAIL")


# Create a custom log method for the "DETAIL" level
def detail(self, message, *args, **kws):
    if self.isEnabledFor(DETAIL):
        self._log(DETAIL, message, args, **kws)


# Add the custom log method to the logging.Logger class
logging.Logger.detail = detail  # type: ignore


def get_logger() -> logging.Logger:
    """The package logger, its level taken from the `LOG_LEVEL` environment variable.

    A stream handler is attached on first call only.
    """
    level_name = os.environ.get("LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL
    logger.setLevel(getattr(logging, level_name, getattr(logging, DEFAULT_LOG_LEVEL)))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        logger.addHandler(handler)

    return logger
