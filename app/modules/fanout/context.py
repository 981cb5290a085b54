"""Fan-out context.

Everything a trigger needs, constructed once at process start and passed
into the triggers: settings, the document store, the push dispatcher, the
idempotency cache and the bounded worker pool used for profile fetches.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from core.logging import get_module_logger
from infrastructure.configuration import Settings
from infrastructure.idempotency import IdempotencyService
from infrastructure.notifications import PushDispatcher
from infrastructure.persistence import DocumentStore
from infrastructure.services import providers

logger = get_module_logger()


@dataclass
class FanoutContext:
    """Injected collaborators of the fan-out triggers.

    Attributes:
        settings: Application settings
        store: Document store (users, businesses, conversations, ...)
        dispatcher: Two-channel push dispatcher
        idempotency: Trigger result cache keyed by event id
        executor: Pool bounded by FANOUT_MAX_WORKERS for profile fetches
    """

    settings: Settings
    store: DocumentStore
    dispatcher: PushDispatcher
    idempotency: IdempotencyService
    executor: Optional[ThreadPoolExecutor] = None

    def __post_init__(self) -> None:
        if self.executor is None:
            self.executor = ThreadPoolExecutor(
                max_workers=self.settings.fanout.FANOUT_MAX_WORKERS,
                thread_name_prefix="fanout",
            )

    def close(self) -> None:
        """Stop the worker pool."""
        self.executor.shutdown(wait=True)


def build_context(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    dispatcher: Optional[PushDispatcher] = None,
    idempotency: Optional[IdempotencyService] = None,
) -> FanoutContext:
    """Build a FanoutContext, filling missing collaborators from the providers."""
    settings = settings or providers.get_settings()
    dispatcher = dispatcher or providers.get_push_dispatcher()
    if store is None:
        store = providers.get_document_store()
        idempotency = idempotency or providers.get_idempotency_service()
    elif idempotency is None:
        idempotency = IdempotencyService(settings, store=store)
    context = FanoutContext(
        settings=settings,
        store=store,
        dispatcher=dispatcher,
        idempotency=idempotency,
    )
    logger.info(
        "fanout_context_built",
        max_workers=settings.fanout.FANOUT_MAX_WORKERS,
        idempotency_backend=settings.idempotency.IDEMPOTENCY_BACKEND,
        channels=dispatcher.get_available_channels(),
    )
    return context
