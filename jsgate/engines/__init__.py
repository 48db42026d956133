"""Check engines used by the file validator."""

from jsgate.engines.base import FallbackCheck, PrimaryCheck
from jsgate.engines.eslint import EslintCheck
from jsgate.engines.integrity import EsprimaIntegrityCheck


__all__ = ["FallbackCheck", "PrimaryCheck", "EslintCheck", "EsprimaIntegrityCheck"]
