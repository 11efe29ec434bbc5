class PortalError(Exception):
    """Base class for errors raised by the portal core."""


class FieldValidationError(PortalError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class GatewayError(PortalError):
    """The persistence gateway rejected a create, update or list call."""


class ProjectNotFoundError(GatewayError):
    pass
