"""Admission thresholds for the document processor."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, TypeVar

LOGGER = logging.getLogger(__name__)

DEFAULT_MIN_DOCUMENT_LENGTH = 250
DEFAULT_MIN_DOCUMENT_QUALITY = -15.0

MIN_LENGTH_ENV = "CONVERTER_MIN_DOCUMENT_LENGTH"
MIN_QUALITY_ENV = "CONVERTER_MIN_DOCUMENT_QUALITY"

_T = TypeVar("_T")


@dataclass(frozen=True)
class ProcessorConfig:
    """Minimum word count and minimum quality score a page needs to be indexed."""

    min_document_length: int = DEFAULT_MIN_DOCUMENT_LENGTH
    min_document_quality: float = DEFAULT_MIN_DOCUMENT_QUALITY

    @classmethod
    def from_env(cls) -> "ProcessorConfig":
        """Read thresholds from the environment at call time."""
        return cls(
            min_document_length=_env_value(
                MIN_LENGTH_ENV, int, DEFAULT_MIN_DOCUMENT_LENGTH
            ),
            min_document_quality=_env_value(
                MIN_QUALITY_ENV, float, DEFAULT_MIN_DOCUMENT_QUALITY
            ),
        )


def _env_value(name: str, convert: Callable[[str], _T], default: _T) -> _T:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return convert(raw)
    except ValueError:
        LOGGER.warning("Invalid %s '%s'; falling back to %s.", name, raw, default)
        return default
