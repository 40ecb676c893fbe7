"""
Unit tests for notification recipient resolution.
"""

from collabhub.domains.apps.entities import Role
from collabhub.notifications.resolver import NotificationKind, NotificationResolver


class TestNotificationResolver:
    def test_owner_and_collaborators(self, hub, team):
        records = NotificationResolver(hub.store).resolve(team.id, NotificationKind.COMMENT, {"text": "hi"})

        assert [r.recipient for r in records] == ["ann", "bob", "dave"]
        assert all(r.event_kind == NotificationKind.COMMENT for r in records)
        assert records[0].email == "ann@example.com"
        assert records[0].app_name == "demo"
        assert records[0].payload == {"text": "hi"}

    def test_preference_filters_recipients(self, hub, team):
        hub.store.update_user_preferences("ann", False)
        hub.store.update_user_preferences("dave", False)

        records = NotificationResolver(hub.store).resolve(team.id, NotificationKind.COMMENT, {})
        assert [r.recipient for r in records] == ["bob"]

    def test_missing_app_yields_nothing(self, hub):
        assert NotificationResolver(hub.store).resolve("app-404", NotificationKind.COMMENT, {}) == []

    def test_non_member_not_notified(self, hub, team, make_user):
        make_user("erin")
        hub.store.add_collaborator(team.id, "carol", role=Role.READ)

        records = NotificationResolver(hub.store).resolve(team.id, NotificationKind.COLLABORATOR, {})
        recipients = {r.recipient for r in records}
        assert "carol" in recipients
        assert "erin" not in recipients
