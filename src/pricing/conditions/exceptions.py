"""Errors raised while building condition targets and conditions."""


class TargetParseError(ValueError):
    """A target DSL string or token could not be parsed."""


class ConditionConfigurationError(ValueError):
    """A filter, grouping, value or target definition is invalid."""
