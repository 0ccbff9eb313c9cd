"""deslop exception hierarchy.

All public exceptions inherit from DeslopError, giving callers a single
base class to catch when they want to handle any deslop-specific failure
without swallowing unrelated errors.
"""


class DeslopError(Exception):
    """Base exception for all deslop errors."""


class ConfigError(DeslopError):
    """Raised for invalid caller arguments or a malformed config file.

    Covers unknown thoroughness or mode values, out-of-range limits, and
    YAML config files whose keys or value types are not recognised. Always
    raised before any file is scanned.
    """


class AnalysisError(DeslopError):
    """Raised when a structural analyzer fails on its input.

    The pipeline catches this per analyzer, logs it, and continues with
    the remaining analyzers so earlier findings are never discarded.
    """
