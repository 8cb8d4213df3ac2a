from __future__ import annotations


class NumThmError(RuntimeError):
    """Base class for errors that abort a run before any output is produced."""


class DuplicateEnvironmentKey(NumThmError):
    def __init__(self, key: str, existing_name: str) -> None:
        super().__init__(
            f"environment key '{key}' is already registered (as {existing_name})"
        )
        self.key = key
        self.existing_name = existing_name


DuplicateKeyError = DuplicateEnvironmentKey


class ConfigError(NumThmError):
    pass


class BookFormatError(NumThmError):
    pass
