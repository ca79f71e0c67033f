"""Unit tests for NotificationService."""

from datetime import timedelta
from uuid import uuid4

import pytest

from travelsocial.core.exceptions import NotFoundOrUnauthorizedError
from travelsocial.models import NotificationType, RelatedEntityType
from travelsocial.services.notification_service import NotificationService


async def _notify(service, sender, recipient, message="Someone liked your post."):
    notification = await service.notify(
        sender=sender,
        recipient=recipient,
        notification_type=NotificationType.LIKE,
        related_entity_id=uuid4(),
        related_entity_type=RelatedEntityType.POST,
        message=message,
    )
    await service.db.commit()
    return notification


class TestNotificationService:
    """Test cases for NotificationService."""

    @pytest.mark.asyncio
    async def test_notify_self_is_suppressed(self, test_session, traveler):
        service = NotificationService(test_session)

        assert await _notify(service, traveler.ref, traveler.ref) is None
        assert await service.list(traveler.ref) == []

    @pytest.mark.asyncio
    async def test_notify_distinguishes_actor_types_with_same_id(self, test_session, traveler):
        """Test that a traveler and an agency sharing an id are different actors."""
        from travelsocial.models import ActorRef

        service = NotificationService(test_session)
        agency_twin = ActorRef.agency(traveler.id)

        notification = await _notify(service, agency_twin, traveler.ref)

        assert notification is not None
        assert notification.recipient == traveler.ref
        assert notification.sender == agency_twin

    @pytest.mark.asyncio
    async def test_list_newest_first_with_read_filter(self, test_session, traveler, other_traveler):
        service = NotificationService(test_session)
        first = await _notify(service, other_traveler.ref, traveler.ref, "first")
        second = await _notify(service, other_traveler.ref, traveler.ref, "second")
        first_id = first.id

        await service.mark_read(first_id, traveler.ref)

        everything = await service.list(traveler.ref)
        assert {n.id for n in everything} == {first_id, second.id}
        assert everything[0].created_at >= everything[1].created_at

        unread = await service.list(traveler.ref, is_read=False)
        assert [n.message for n in unread] == ["second"]

        read = await service.list(traveler.ref, is_read=True)
        assert [n.id for n in read] == [first_id]

    @pytest.mark.asyncio
    async def test_mark_read_by_someone_else_looks_like_not_found(self, test_session, traveler, other_traveler):
        service = NotificationService(test_session)
        notification = await _notify(service, other_traveler.ref, traveler.ref)
        notification_id = notification.id

        with pytest.raises(NotFoundOrUnauthorizedError) as exc_info:
            await service.mark_read(notification_id, other_traveler.ref)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Notification not found or unauthorized."

        with pytest.raises(NotFoundOrUnauthorizedError):
            await service.mark_read(uuid4(), traveler.ref)

    @pytest.mark.asyncio
    async def test_delete_only_by_recipient(self, test_session, traveler, other_traveler):
        service = NotificationService(test_session)
        notification = await _notify(service, other_traveler.ref, traveler.ref)
        notification_id = notification.id

        with pytest.raises(NotFoundOrUnauthorizedError):
            await service.delete(notification_id, other_traveler.ref)

        await service.delete(notification_id, traveler.ref)
        assert await service.list(traveler.ref) == []

        with pytest.raises(NotFoundOrUnauthorizedError):
            await service.delete(notification_id, traveler.ref)

    @pytest.mark.asyncio
    async def test_unread_count_and_mark_all_read(self, test_session, traveler, other_traveler, agency):
        service = NotificationService(test_session)
        await _notify(service, other_traveler.ref, traveler.ref)
        await _notify(service, agency.ref, traveler.ref)
        await _notify(service, traveler.ref, other_traveler.ref)

        assert await service.unread_count(traveler.ref) == 2

        assert await service.mark_all_read(traveler.ref) == 2
        assert await service.unread_count(traveler.ref) == 0
        assert await service.unread_count(other_traveler.ref) == 1

    @pytest.mark.asyncio
    async def test_listed_timestamps_are_utc_aware(self, test_session, traveler, other_traveler):
        """Test that flushed and reloaded rows both carry UTC timestamps."""
        service = NotificationService(test_session)
        first = await _notify(service, other_traveler.ref, traveler.ref, "first")
        await _notify(service, other_traveler.ref, traveler.ref, "second")

        # mark_read reloads the first row from the database
        await service.mark_read(first.id, traveler.ref)

        listed = await service.list(traveler.ref)

        assert [n.created_at.utcoffset() for n in listed] == [timedelta(0), timedelta(0)]
        assert listed[0].created_at >= listed[1].created_at
