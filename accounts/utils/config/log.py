import logging

from pythonjsonlogger.json import JsonFormatter

from accounts.utils.config.env import settings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging() -> None:
    """Configure the root logger from settings.

    Safe to call more than once; an existing handler installed by a previous
    call is replaced rather than duplicated.
    """
    handler = logging.StreamHandler()
    if settings.log_json:
        formatter: logging.Formatter = JsonFormatter(
            LOG_FORMAT,
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
    else:
        formatter = logging.Formatter(LOG_FORMAT)
    handler.setFormatter(formatter)
    handler.set_name("accounts")

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == "accounts":
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())
