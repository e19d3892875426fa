# exceptions.py
# Error types raised by the simulator.


class NavigationError(Exception):
    """Base exception for all navigation simulator errors."""
    pass


class InvalidRoute(NavigationError):
    """Raised when a route has too few coordinates to be navigated."""

    def __init__(self, route_name: str, coordinate_count: int) -> None:
        self.route_name = route_name
        self.coordinate_count = coordinate_count
        super().__init__(
            f"Route '{route_name}' has {coordinate_count} coordinate(s); "
            f"at least 2 are needed to navigate."
        )


class ConfigurationError(NavigationError):
    """Raised when configuration is invalid."""
    pass


class RouteFileError(NavigationError):
    """Raised when a route file cannot be read or parsed."""
    pass
