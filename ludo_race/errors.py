# Exception types raised by the rule engine
class LudoError(Exception):
    """Base exception for rule-engine errors."""

    pass


class InvalidSetup(LudoError):
    """Raised when a game setup has bad player/AI counts or colors."""

    pass


class EngineBusy(LudoError):
    """Raised when a request arrives in a phase that cannot accept it."""

    pass


class InvalidMove(LudoError):
    """Raised when a chosen token is not among the current legal moves."""

    pass


class GameNotActive(LudoError):
    """Raised when no game is running or the game is already won."""

    pass


class NoSavedGame(LudoError):
    """Raised when no usable saved game is present."""

    pass


class CorruptSave(NoSavedGame):
    """Raised when a saved record exists but cannot be decoded."""

    pass
