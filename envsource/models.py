"""Request models and enums for configuration resolution."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EnvType(str, Enum):
    """Environment types understood by the dispatcher.

    - LOCAL: Read values from the credential store
    - DEV: Read values from the credential store
    - PROD: Read values from a config file, falling back to env vars
    """

    LOCAL = "local"
    DEV = "dev"
    PROD = "prod"


class ConfigType(str, Enum):
    """Config file formats.

    Any other string may be used as a custom tag kind for the
    environment and credential-store sources.
    """

    JSON = "json"
    YAML = "yaml"


class SourceConfig(BaseModel):
    """A single resolution request.

    The target is populated in place; every other attribute is read-only
    to the resolvers.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(
        default="",
        description="Config file name, also the credential store service name",
    )
    path: str = Field(
        default="",
        description="Directory searched for the config file (defaults to ./)",
    )
    type: str = Field(
        default=ConfigType.JSON.value,
        description="File format and field tag kind (json, yaml or a custom tag)",
    )
    env_prefix: str = Field(
        default="",
        description="Prefix joined to env var names with an underscore",
    )
    skip_fields: list[str] = Field(
        default_factory=list,
        description="Declared field names never populated",
    )
    target: Any = Field(
        ...,
        description="Dataclass or pydantic model instance to populate",
    )
    debug: bool = Field(default=False, description="Emit debug log events")

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, ConfigType):
            return value.value
        return value

    @field_validator("target")
    @classmethod
    def _require_target(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("target must be a dataclass or pydantic model instance")
        return value

    @property
    def format(self) -> str:
        """File format selector, case-insensitively normalized."""
        return self.type.lower()

    @property
    def tag_kind(self) -> str:
        """Tag kind used to derive field keys.

        json and yaml are matched case-insensitively; custom kinds are
        used exactly as given.
        """
        if self.format in (ConfigType.JSON.value, ConfigType.YAML.value):
            return self.format
        return self.type
