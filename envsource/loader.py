"""Dispatch a resolution request to the source for its environment type."""

import structlog

from envsource.errors import UnsupportedEnvironmentError
from envsource.models import EnvType, SourceConfig
from envsource.observability.logging import get_logger
from envsource.sources.credentials import build_from_store
from envsource.sources.file import load_file


def get(
    env_type: EnvType | str,
    config: SourceConfig,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> None:
    """Populate config.target from the source selected by env_type.

    - local, dev: credential store
    - prod: config file, falling back to env vars when the file is absent

    Args:
        env_type: Environment type (EnvType member or its value)
        config: Resolution request
        logger: Logger for debug events, built from config.debug when None

    Raises:
        UnsupportedEnvironmentError: If env_type is not local, dev or prod
    """
    log = logger or get_logger(__name__, debug=config.debug)
    value = env_type.value if isinstance(env_type, EnvType) else env_type

    if value in (EnvType.DEV.value, EnvType.LOCAL.value):
        log.debug("loading_config_from_keychain", service=config.name)
        build_from_store(config, logger=log)
    elif value == EnvType.PROD.value:
        log.debug("loading_config_from_file", file=config.name, path=config.path)
        load_config(config, logger=log)
    else:
        raise UnsupportedEnvironmentError(str(value))


def load_config(
    config: SourceConfig,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> None:
    """Populate config.target from its file, or env vars if the file is absent."""
    load_file(config, logger=logger or get_logger(__name__, debug=config.debug))
