"""Fan-out pipeline.

Shared composition behind every trigger:

    idempotency check -> resolve groups -> fetch profiles (bounded pool,
    resolution order) -> classify tokens and stage badge increments ->
    single badge commit -> drop the actor's tokens -> read badge of the first
    recipient -> render and dispatch once per group -> inbox records ->
    cache outcome
"""

from typing import Callable, Dict, List, Optional

from core.logging import get_module_logger
from infrastructure.idempotency import IdempotencyKeyBuilder
from infrastructure.notifications import (
    ClassifiedTokens,
    DispatchResult,
    PushPayload,
    classify,
)
from infrastructure.persistence import SERVER_TIMESTAMP
from modules.fanout.badges import BadgeCounterStore
from modules.fanout.context import FanoutContext
from modules.fanout.copy import RenderedCopy
from modules.fanout.domain import DomainEvent, TriggerOutcome, UserTokenProfile
from modules.fanout.profiles import ProfileRepository
from modules.fanout.recipients import RecipientResolver, unique_recipients

logger = get_module_logger()

USER_NOTIFICATIONS = "user_notifications"

Renderer = Callable[[DomainEvent], RenderedCopy]


class FanoutPipeline:
    """Runs one domain event through resolution, badges and dispatch.

    Args:
        context: Injected collaborators
    """

    def __init__(self, context: FanoutContext):
        self._context = context
        self._settings = context.settings
        self.resolver = RecipientResolver(context.store)
        self.profiles = ProfileRepository(context.store)
        self.badges = BadgeCounterStore(
            context.store, default_badge=self._settings.fanout.DEFAULT_BADGE
        )
        self._keys = IdempotencyKeyBuilder(namespace="fanout")

    def run(
        self, event: DomainEvent, renderers: Dict[str, Renderer]
    ) -> Optional[TriggerOutcome]:
        """Deliver ``event``.

        Args:
            event: Parsed domain event
            renderers: Copy renderer per recipient group name

        Returns:
            TriggerOutcome, or None when nothing was dispatched
        """
        key = self._keys.build(event.event_type, event_id=event.event_id)
        cached = self._context.idempotency.get(key)
        if cached is not None:
            logger.info("trigger_duplicate_delivery", idempotency_key=key)
            outcome = cached.get("outcome")
            return TriggerOutcome.from_response(outcome) if outcome else None

        groups = self.resolver.resolve_groups(event)
        if not groups:
            logger.info("no_recipients_resolved")
            return None
        recipients = unique_recipients(
            user_id for group in groups for user_id in group.user_ids
        )
        logger.info("recipients_resolved", recipient_count=len(recipients))

        profiles = self._fetch_profiles(recipients)
        badge_batch = self.badges.begin()
        per_user: Dict[str, ClassifiedTokens] = {}
        for user_id in recipients:
            profile = profiles.get(user_id)
            if profile is None:
                continue
            tokens = profile.all_tokens()
            if not tokens:
                logger.info("recipient_has_no_tokens", user_id=user_id)
                continue
            per_user[user_id] = classify(tokens)
            badge_batch.stage_increment(user_id)
        badge_committed = badge_batch.commit()

        actor_tokens = self._actor_tokens(event.actor_id, profiles)
        buckets: Dict[str, ClassifiedTokens] = {}
        notified: Dict[str, List[str]] = {}
        for group in groups:
            bucket = ClassifiedTokens()
            members = []
            for user_id in group.user_ids:
                if user_id in per_user:
                    bucket = bucket.merge(per_user[user_id])
                    members.append(user_id)
            # A group that names the actor keeps the actor's devices.
            if event.actor_id not in members:
                bucket = bucket.exclude(actor_tokens)
            if not bucket.is_empty:
                buckets[group.name] = bucket
                notified[group.name] = members

        if not buckets:
            logger.info("no_tokens_to_notify", badge_committed=badge_committed)
            self._context.idempotency.set(key, {"outcome": None})
            return None

        badge = self.badges.read_badge(recipients[0])
        results: Dict[str, DispatchResult] = {}
        for group_name, bucket in buckets.items():
            rendered = renderers[group_name](event)
            payload = PushPayload(
                title=rendered.title,
                body=rendered.body,
                data=rendered.data,
                badge=badge,
                channel_id=rendered.channel_id,
            )
            results[group_name] = self._context.dispatcher.dispatch(bucket, payload)
            self._write_inbox_records(notified[group_name], rendered)

        outcome = TriggerOutcome(
            event_type=event.event_type,
            event_id=event.event_id,
            recipients=notified,
            groups=results,
            badge_committed=badge_committed,
        )
        logger.info("trigger_completed", **outcome.total.model_dump())
        self._context.idempotency.set(key, {"outcome": outcome.to_response()})
        return outcome

    def _fetch_profiles(self, user_ids: List[str]) -> Dict[str, Optional[UserTokenProfile]]:
        fetched = self._context.executor.map(self._safe_fetch, user_ids)
        return dict(zip(user_ids, fetched))

    def _safe_fetch(self, user_id: str) -> Optional[UserTokenProfile]:
        try:
            return self.profiles.fetch(user_id)
        except Exception as e:
            logger.error(
                "recipient_profile_fetch_error",
                user_id=user_id,
                error=str(e),
                exc_info=True,
            )
            return None

    def _actor_tokens(
        self,
        actor_id: Optional[str],
        profiles: Dict[str, Optional[UserTokenProfile]],
    ) -> List[str]:
        if not actor_id:
            return []
        profile = profiles[actor_id] if actor_id in profiles else self._safe_fetch(actor_id)
        return profile.all_tokens() if profile else []

    def _write_inbox_records(self, user_ids: List[str], rendered: RenderedCopy) -> None:
        if not self._settings.fanout.INBOX_WRITE_ENABLED:
            return
        for user_id in user_ids:
            result = self._context.store.add(
                USER_NOTIFICATIONS,
                {
                    "userId": user_id,
                    "title": rendered.title,
                    "message": rendered.body,
                    "type": rendered.notification_type,
                    "data": {k: v for k, v in rendered.data.items() if v is not None},
                    "read": False,
                    "createdAt": SERVER_TIMESTAMP,
                },
            )
            if not result.is_success:
                logger.warning(
                    "inbox_record_write_failed", user_id=user_id, error=result.message
                )
