"""Best-effort credential repair after a failed catalog call."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.queue.repository import access_token_path
from ...domain.shared.events import CredentialRefreshed, CredentialRefreshFailed, EventBus
from ...domain.shared.exceptions import DomainError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.queue.repository import MetadataStore
    from ...utils.background import BackgroundTasks
    from ..interfaces.token_exchanger import TokenExchanger

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"


class RefreshOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity: str
    is_device_call: bool
    succeeded: bool
    reason: str | None = None


class CredentialRefreshCoordinator:
    """Exchanges a refresh credential for a new access credential.

    The request that triggered the refresh has already failed and been
    answered; the new credential is only written to the store under
    ``users/{identity}/access_token``. Outcomes are published on the event
    bus and never raised.
    """

    def __init__(
        self,
        *,
        token_exchanger: TokenExchanger,
        metadata_store: MetadataStore,
        background_tasks: BackgroundTasks,
        event_bus: EventBus,
    ) -> None:
        self._exchanger = token_exchanger
        self._store = metadata_store
        self._tasks = background_tasks
        self._bus = event_bus

    def submit(
        self, refresh_token: str | None, identity: str | None, is_device_call: bool
    ) -> asyncio.Task[RefreshOutcome]:
        """Schedule ``refresh`` in the background and return without waiting."""
        who = identity or ANONYMOUS
        logger.info(LogTemplates.REFRESH_SCHEDULED, who, is_device_call)
        return self._tasks.spawn(
            self.refresh(refresh_token, identity, is_device_call), name=f"refresh:{who}"
        )

    async def refresh(
        self, refresh_token: str | None, identity: str | None, is_device_call: bool
    ) -> RefreshOutcome:
        who = identity or ANONYMOUS
        try:
            if not refresh_token:
                raise DomainError(ErrorMessages.REFRESH_TOKEN_MISSING)
            access_token = await self._exchanger.exchange(refresh_token)
        except Exception as e:
            reason = e.message if isinstance(e, DomainError) else str(e) or type(e).__name__
            await self._bus.publish(
                CredentialRefreshFailed(
                    identity=who, is_device_call=is_device_call, reason=reason
                )
            )
            return RefreshOutcome(
                identity=who, is_device_call=is_device_call, succeeded=False, reason=reason
            )

        if identity:
            self._store.set_field(access_token_path(identity), access_token)

        await self._bus.publish(CredentialRefreshed(identity=who, is_device_call=is_device_call))
        return RefreshOutcome(identity=who, is_device_call=is_device_call, succeeded=True)


class CredentialRefreshLogger:
    """Sole consumer of refresh outcomes: writes them to the log."""

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus
        self._started = False

    def start(self) -> None:
        if self._started:
            return
        self._bus.subscribe(CredentialRefreshed, self._on_refreshed)
        self._bus.subscribe(CredentialRefreshFailed, self._on_failed)
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self._bus.unsubscribe(CredentialRefreshed, self._on_refreshed)
        self._bus.unsubscribe(CredentialRefreshFailed, self._on_failed)
        self._started = False

    async def _on_refreshed(self, event: CredentialRefreshed) -> None:
        logger.info(LogTemplates.REFRESH_SUCCEEDED, event.identity, event.is_device_call)

    async def _on_failed(self, event: CredentialRefreshFailed) -> None:
        logger.error(
            LogTemplates.REFRESH_FAILED, event.identity, event.is_device_call, event.reason
        )
