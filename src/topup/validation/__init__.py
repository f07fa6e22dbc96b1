"""Input validation module."""

from topup.validation.core import ValidationResult, ValidationRunner
from topup.validation.reporter import ConsoleReporter

__all__ = ["ValidationResult", "ValidationRunner", "ConsoleReporter"]
