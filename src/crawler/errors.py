class CrawlerError(Exception):
    """Base error for dungeon crawler domain exceptions."""


class LoadError(CrawlerError):
    """Raised when a level cannot be read or does not describe a complete grid."""


class GridError(CrawlerError, ValueError):
    """Raised for invalid grid construction or grid misuse."""


class GridAllocationError(GridError):
    """Raised when a grid cannot be allocated (non-positive dimensions)."""


class GridReleasedError(GridError):
    """Raised when a grid is used after it has been released."""


class PlayerMarkerError(GridError):
    """Raised when a grid does not hold exactly one player marker."""


class SessionOverError(CrawlerError):
    """Raised when a turn is requested on a session that already ended."""
