class DungeonError(Exception):
    """Base error for tabletop dungeon exceptions."""


class ConfigurationError(DungeonError, ValueError):
    """Raised when generator settings violate a documented precondition."""
