from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.events import clear_handlers, get_registered_events
from infrastructure.logging.setup import configure_logging
from infrastructure.services import get_settings
from modules.fanout import FanoutTriggers, build_context, register_triggers

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _get_logger(settings: "Settings") -> BoundLogger:
    return configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production
    )


def _list_configs(settings: "Settings", logger: BoundLogger) -> None:
    config_settings: dict[str, list[object]] = {"settings": []}

    for key, value in settings.model_dump().items():
        if isinstance(value, dict):
            config_settings[key] = list(value.keys())
        else:
            config_settings["settings"].append({key: value})

    logger.info("configuration_initialized", base_settings=config_settings["settings"])
    for key, value in config_settings.items():
        if key != "settings":
            logger.info("configuration_loaded", config_setting=key, keys=value)


def _activate_triggers(app: FastAPI, settings: "Settings", logger: BoundLogger) -> None:
    # A context placed on app.state before startup (tests, local runs) is kept.
    context = getattr(app.state, "fanout", None)
    if context is None:
        context = build_context(settings)
    app.state.fanout = context

    clear_handlers()
    register_triggers(FanoutTriggers(context))
    logger.info("fanout_triggers_registered", events=get_registered_events())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = _get_logger(settings)

    app.state.settings = settings
    app.state.logger = logger

    logger.info("application_startup")
    _list_configs(settings, logger)

    try:
        _activate_triggers(app, settings, logger)
    except Exception as exc:
        logger.error("fanout_activation_failed", error=str(exc))
        raise

    yield

    logger.info("application_shutdown")
    clear_handlers()
    app.state.fanout.close()
    app.state.fanout = None
