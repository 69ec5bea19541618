"""
routewatch/utils/exceptions.py

Custom exceptions for the project.
"""

class RouteWatchError(Exception):
    """
    Base exception for routewatch failures that should stop a command.
    """
    pass


class KnownRouteStoreError(RouteWatchError):
    """
    Exception raised when the known-routes file cannot be written.
    """
    pass
