"""Development settings."""

from __future__ import annotations

from copy import deepcopy

from .base import *  # noqa
from .base import LOGGING as BASE_LOGGING

LOGGING = deepcopy(BASE_LOGGING)

DEBUG = True

# Development logging - more verbose, human-readable format with extras
LOGGING["handlers"]["console"]["formatter"] = "dev"
LOGGING["loggers"]["awesome_fields"]["level"] = "DEBUG"
LOGGING["loggers"]["django.template"]["level"] = "INFO"
