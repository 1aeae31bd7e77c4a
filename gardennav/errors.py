"""
Exceptions raised by gardennav.

Data anomalies in headings and graphs are logged and tolerated; these
exceptions cover caller mistakes that cannot be recovered locally.
"""


class NavError(Exception):
    """Base class for gardennav errors."""
    pass


class ConfigError(NavError):
    """Configuration file or environment value could not be applied."""
    pass


class GraphDataError(NavError):
    """Graph description does not have the expected shape."""
    pass
