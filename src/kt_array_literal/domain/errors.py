"""Errors raised by the inspection. Not-applicable nodes are never errors."""


class RewriteContractError(RuntimeError):
    """The tree no longer matches what a diagnostic was reported against."""


class FixAlreadyAppliedError(RewriteContractError):
    """A rewrite action was invoked a second time."""


class ConfigurationError(ValueError):
    """Invalid language version, feature name or config value."""
