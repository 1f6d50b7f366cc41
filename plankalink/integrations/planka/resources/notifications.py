"""
Notification operations.

Planka has no bulk update endpoint, so marking several notifications as
read issues one PATCH per id concurrently. The batch succeeds only if every
PATCH does; otherwise nothing is returned and BatchOperationError names the
failed ids.
"""

from __future__ import annotations

import asyncio
import logging

from plankalink.integrations.base import BatchOperationError
from plankalink.integrations.planka.resources.base import Resource, operation
from plankalink.integrations.planka.schemas import (
    INTEGRATION,
    GetNotificationParams,
    ItemEnvelope,
    ItemsEnvelope,
    MarkNotificationsAsReadParams,
    Notification,
    NotificationList,
)

logger = logging.getLogger(__name__)


class NotificationOperations(Resource):
    """Read notifications and mark them as read."""

    @operation("get notifications")
    async def list(self) -> NotificationList:
        response = await self._call(ItemsEnvelope[Notification], "/api/notifications")
        return NotificationList(notifications=response.items, included=response.included)

    @operation("get notification")
    async def get(self, notification_id: str) -> Notification:
        params = self._params(GetNotificationParams, id=notification_id)

        response = await self._call(
            ItemEnvelope[Notification], f"/api/notifications/{params.id}"
        )
        return response.item

    @operation("mark notifications as read")
    async def mark_read(self, ids: list[str]) -> list[Notification]:
        """
        Mark notifications as read.

        Returns:
            Updated notifications in the order of `ids`

        Raises:
            OperationError: wrapping BatchOperationError if any PATCH failed
        """
        params = self._params(MarkNotificationsAsReadParams, ids=ids)
        if not params.ids:
            return []

        logger.info(f"[{INTEGRATION}] Marking {len(params.ids)} notifications as read")

        results = await asyncio.gather(
            *(self._mark_one(notification_id) for notification_id in params.ids),
            return_exceptions=True,
        )

        failures = {
            notification_id: result
            for notification_id, result in zip(params.ids, results)
            if isinstance(result, BaseException)
        }
        if failures:
            details = "; ".join(f"{nid}: {err}" for nid, err in failures.items())
            raise BatchOperationError(
                f"{len(failures)} of {len(params.ids)} notifications failed ({details})",
                INTEGRATION,
                failures=failures,
                total=len(params.ids),
            )

        return list(results)

    async def _mark_one(self, notification_id: str) -> Notification:
        response = await self._call(
            ItemEnvelope[Notification],
            f"/api/notifications/{notification_id}",
            method="PATCH",
            body={"isRead": True},
        )
        return response.item

    @operation("get unread notifications count")
    async def unread_count(self) -> int:
        result = await self.list()
        return sum(1 for notification in result.notifications if not notification.is_read)

    @operation("mark all notifications as read")
    async def mark_all_read(self) -> list[Notification]:
        """Mark every unread notification; no request when none are unread."""
        result = await self.list()
        unread_ids = [n.id for n in result.notifications if not n.is_read]

        if not unread_ids:
            return []

        return await self.mark_read(unread_ids)
