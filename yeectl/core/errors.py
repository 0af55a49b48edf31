"""Domain-specific errors for yeectl."""


class YeectlError(Exception):
    """Base error for yeectl."""


class ConfigError(YeectlError):
    """Raised when the configuration file cannot be read or fails validation."""


class DiscoveryError(YeectlError):
    """Raised when the discovery exchange cannot be performed at all."""


class SocketBindError(DiscoveryError):
    """Raised when the discovery socket cannot bind its listen address."""


class PayloadParseError(YeectlError):
    """Raised when an advertisement payload cannot be turned into a bulb record."""


class DeviceSelectionError(YeectlError):
    """Raised when a bulb hint cannot be resolved to a single bulb."""


class TransportError(YeectlError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the control connection cannot be established."""


class TransportSendError(TransportError):
    """Raised when writing the command to the control connection fails."""


class TransportReceiveError(TransportError):
    """Raised when the reply cannot be read; the bulb may still have run the command."""
