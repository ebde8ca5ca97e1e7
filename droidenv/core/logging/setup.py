# droidenv/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from droidenv.app.globals import config, configBool
from .formatters import DevFormatter, JsonFormatter
from .filters import RecurringSuppressFilter

__all__ = ["configureLogging"]



def configureLogging() -> None:
    """
    Initiate the global logging configuration. Never called on import;
    the embedding application decides when droidenv may touch the root logger.

    Dev:
      - Console pretty logs (DEBUG)
      - JSON file log (DEBUG), if `logging.file` is set

    Prod:
      - Console INFO
      - JSON file logs INFO with rotation, if `logging.file` is set
      - Optional recurring suppression (toggle)
    """
    devMode = configBool("debug.devModeEnabled", False)
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)

    handlers: list[logging.Handler] = []

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    handlers.append(consoleHandler)

    logFile = config("logging.file", None)
    if logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        handlers.append(fileHandler)

    # Optional recurring suppression (disabled by default)
    if configBool("debug.suppressRecurringMessages.enabled", False):
        levelName = str(config("debug.suppressRecurringMessages.summaryLevel", "INFO")).upper()
        summaryLevel = getattr(logging, levelName, logging.INFO)

        suppressFilter = RecurringSuppressFilter(
            windowSeconds=int(config("debug.suppressRecurringMessages.windowSeconds", 60)),
            maxPerWindow=int(config("debug.suppressRecurringMessages.maxPerWindow", 5)),
            maxKeys=int(config("debug.suppressRecurringMessages.maxKeys", 1024)),
            summaryLevel=summaryLevel,
        )
        for handler in handlers:
            handler.addFilter(suppressFilter)

    for handler in handlers:
        root.addHandler(handler)
