import logging
from pathlib import Path

from keel import env_vars

LOG_FORMAT = "%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s"


def init_logger(name: str, file_name: str | None = None) -> logging.Logger:
    """Return a module logger configured from the KEEL_LOGGING_* environment.

    Records go to stderr unless KEEL_LOGGING_PATH is set, in which case they are
    appended to ``<KEEL_LOGGING_PATH>/<file_name or KEEL_LOGGING_FILE_NAME>``.
    Calling it twice for the same name does not add a second handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(env_vars.KEEL_LOGGING_LEVEL.upper())
    if logger.handlers:
        return logger

    log_dir = env_vars.KEEL_LOGGING_PATH
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(
            Path(log_dir) / (file_name or env_vars.KEEL_LOGGING_FILE_NAME), encoding="utf-8"
        )
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
