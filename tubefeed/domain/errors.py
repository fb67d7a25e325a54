class GatewayError(Exception):
    """Base class for failures raised by an extraction gateway."""


class ExtractionError(GatewayError):
    """Upstream returned content that could not be parsed or is unsupported."""


class TemporaryFailure(GatewayError):
    """Transient upstream or network failure. Retrying may succeed."""


class NotFound(GatewayError):
    """Requested item does not exist upstream."""
