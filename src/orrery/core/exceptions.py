"""Exceptions shared across the orrery package."""


class ConfigurationError(RuntimeError):
    """The body tree or catalogue violates a structural invariant.

    Raised for faults that cannot be recovered locally: a satellite of a
    satellite found while walking the parent chain, an unknown parent or
    position model in the catalogue, or an unreadable configuration file.
    """
