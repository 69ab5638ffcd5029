"""Exception hierarchy for configuration resolution.

All resolution failures inherit from EnvSourceError, which carries a
human-readable message. Subclasses add the attributes a caller needs to
react to a specific failure (the offending key, path, or type string).
"""


class EnvSourceError(Exception):
    """Base exception for all resolution errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnsupportedEnvironmentError(EnvSourceError):
    """Raised when dispatch receives an environment type it cannot handle."""

    def __init__(self, env_type: str) -> None:
        super().__init__(f"unsupported environment type: {env_type}")
        self.env_type = env_type


class UnsupportedFormatError(EnvSourceError):
    """Raised when a config file format is neither json nor yaml."""

    def __init__(self, format: str) -> None:
        super().__init__(f"unsupported file type: {format}")
        self.format = format


class FileReadError(EnvSourceError):
    """Raised when an existing config file cannot be opened or read."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class DecodeError(EnvSourceError):
    """Raised when config file content is malformed for its format."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class CoercionError(EnvSourceError):
    """Raised when a single value cannot be converted or stored."""


class FieldCoercionError(EnvSourceError):
    """Raised when a source value cannot be assigned to a target field."""

    def __init__(self, field_name: str, reason: str) -> None:
        super().__init__(f"failed to set field {field_name}: {reason}")
        self.field_name = field_name
        self.reason = reason


class MissingEnvironmentError(EnvSourceError):
    """Raised after an environment pass when one or more keys were unset.

    The message lists every missing key, one per line, so a caller sees
    all of them from a single failure.
    """

    def __init__(self, missing: list[str]) -> None:
        notes = [f"env not found: {key}" for key in missing]
        super().__init__("\n".join(notes))
        self.missing = list(missing)


class CredentialStoreError(EnvSourceError):
    """Raised when the credential store backend fails."""

    def __init__(self, message: str, service: str, key: str) -> None:
        super().__init__(message)
        self.service = service
        self.key = key
