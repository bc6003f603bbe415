# keeper/core/errors.py
"""
Error taxonomy for registry operations.
Every error is fatal to the current invocation; nothing is retried.
"""


class KeeperError(Exception):
    """Base for all errors surfaced to the caller."""


class ArgumentCountError(KeeperError):
    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        noun = "argument" if expected == 1 else "arguments"
        super().__init__(f"Incorrect number of arguments. Expecting {expected} {noun}, got {got}")


class UnknownFunctionError(KeeperError):
    def __init__(self, function: str):
        self.function = function
        super().__init__(f"Received unknown function invocation: {function!r}")


class InvalidFunctionError(KeeperError):
    def __init__(self, function: str):
        self.function = function
        super().__init__(f'Invalid query function name {function!r}. Expecting "query"')


class StorageError(KeeperError):
    """Failure reported by the key-value store; original error is chained as __cause__."""


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


class StorageDeleteError(StorageError):
    pass


class CodecError(KeeperError):
    pass


class SerializationError(CodecError):
    pass


class DeserializationError(CodecError):
    pass
