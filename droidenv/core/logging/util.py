# droidenv/core/logging/util.py
from __future__ import annotations

import logging



def getLogger(name: str, side: str = "") -> logging.Logger:
    return logging.getLogger(f"{side}.{name}" if side else name)
