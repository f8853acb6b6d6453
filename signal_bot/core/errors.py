"""Error taxonomy for the signal bot."""


class SignalBotError(Exception):
    """Base class for all bot errors."""


class ConfigError(SignalBotError, ValueError):
    """Invalid configuration value."""


class InsufficientHistory(SignalBotError):
    """Historical data cannot produce a sell threshold."""


class ThresholdNotArmed(InsufficientHistory):
    """A candle reached the state machine before a threshold was set."""


class TransportFailure(SignalBotError):
    """Market data collaborator failed (history fetch or live stream)."""


class DeliveryError(SignalBotError):
    """Notification could not be delivered."""
