class ExtractionError(Exception):
    """Image extraction did not produce a usable answer."""


class ExtractionConfigError(ExtractionError):
    pass


class ExtractionRateLimited(ExtractionError):
    pass


class ExtractionFailed(ExtractionError):
    pass
