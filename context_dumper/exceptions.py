class ContextDumperError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(ContextDumperError):
    # errors related to configuration.
    pass

class InvalidRequestError(ContextDumperError):
    # the caller supplied bad parameters; raised before any traversal starts.
    pass

class DumpInternalError(ContextDumperError):
    # unexpected failure while walking, rendering or planning.
    pass

class OutputError(ContextDumperError):
    # errors during output operations.
    pass
