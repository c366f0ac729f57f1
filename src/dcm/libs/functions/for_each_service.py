import logging
from collections.abc import Callable, Mapping
from typing import Any

from dcm.libs.classes.errors import ConfigShapeError
from dcm.libs.schemas.result import Result

logger = logging.getLogger(__name__)

ServiceAction = Callable[[str, Mapping[str, Any]], Result]
SoftErrorHandler = Callable[[str, Result], None]


def _log_soft_error(service: str, result: Result) -> None:
    logger.warning("%s: %s", service, result.error)


def for_each_service(
    services: Mapping[Any, Any],
    action: ServiceAction,
    *,
    on_soft_error: SoftErrorHandler | None = None,
) -> Result:
    """Run ``action`` for every service in declared order.

    A result with a non-zero code stops the iteration and is returned as is.
    A result with code 0 and an error is handed to ``on_soft_error`` and the
    iteration moves on. A service whose configuration is not a mapping aborts
    the iteration with a ``ConfigShapeError``.
    """
    report = on_soft_error or _log_soft_error

    for name, config in services.items():
        service = str(name)
        if not isinstance(config, Mapping):
            return Result.hard(
                ConfigShapeError(f"Error reading configs for service [{service}]")
            )

        result = action(service, config)
        if result.is_hard:
            logger.debug("Stopping at service %s with code %d", service, result.code)
            return result
        if result.is_soft:
            report(service, result)

    return Result.ok()
