class FlierError(Exception):
    pass


class InitializationError(FlierError):
    pass


class InvalidResource(FlierError, ValueError):
    pass


class MissingResourceId(FlierError, ValueError):
    pass


class InvalidFileFormat(FlierError):
    pass


class RegistryFrozen(FlierError):
    pass


class IndexerNotConfigured(FlierError):
    pass
