import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from dcm.libs.classes.errors import ConfigFileError, ConfigShapeError

logger = logging.getLogger(__name__)


def _unwrap_services(document: Mapping[Any, Any]) -> Mapping[Any, Any]:
    version = document.get("version")
    services = document.get("services")

    if isinstance(version, str) and isinstance(services, Mapping):
        logger.debug("Compose file version %s, using its services section", version)
        return services

    return document


def load_services(path: Path) -> Mapping[Any, Any]:
    if not path.exists():
        raise ConfigFileError(f"Configuration file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise ConfigFileError(f"Error reading config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Error parsing config file {path}: {e}") from e

    if document is None:
        return {}

    if not isinstance(document, Mapping):
        raise ConfigShapeError(
            f"Configuration file must contain a mapping of services: {path}"
        )

    return _unwrap_services(document)
