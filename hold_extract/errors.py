class HoldExtractError(Exception):
    """Base class for pipeline failures."""


class UnprocessableImageError(HoldExtractError):
    def __init__(self, message: str = "The selected wall image could not be processed."):
        super().__init__(message)


class NoShapesFoundError(HoldExtractError):
    def __init__(self, message: str = "No holds were detected. Try adding holds manually."):
        super().__init__(message)
