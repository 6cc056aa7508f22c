# storefront/logging_config.py
import logging

from pythonjsonlogger import jsonlogger

from . import config


def configure_logging(level=None, json_output=None):
    level = level or config.LOG_LEVEL
    json_output = config.LOG_JSON if json_output is None else json_output

    handler = logging.StreamHandler()
    if json_output:
        formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
    else:
        formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s')
    handler.setFormatter(formatter)

    root = logging.getLogger()
    # Avoid adding duplicate handlers on reload
    if not any(getattr(h, "_storefront", False) for h in root.handlers):
        handler._storefront = True
        root.addHandler(handler)
    root.setLevel(level)
