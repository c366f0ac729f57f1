from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from dcm.app_config import AppConfig
from dcm.libs.functions.load_services import load_services


@dataclass
class AppState:
    app_config: AppConfig
    services: Mapping[Any, Any]

    @classmethod
    def load(cls, app_config: AppConfig) -> "AppState":
        return cls(app_config=app_config, services=load_services(app_config.config_path))
