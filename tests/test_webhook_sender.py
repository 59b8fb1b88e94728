#!/usr/bin/env python3
"""
Tests for Discord / Google Workspace message building and delivery.
"""
from unittest.mock import MagicMock, patch

import requests

from conftest import TODAY

from apigee_backup.backup.backup_orchestrator import BackupOutcome
from apigee_backup.notification.webhook_sender import (
    COLOR_GREEN,
    COLOR_RED,
    DiscordSender,
    NotificationDispatcher,
    WorkspaceSender,
)

DISCORD_URL = "https://discord.test/webhook"
WORKSPACE_URL = "https://chat.test/webhook"


def session_with_status(status_code):
    session = MagicMock()
    session.post.return_value.status_code = status_code
    return session


class TestDiscordMessages:

    def test_project_message(self):
        message = DiscordSender(DISCORD_URL).build_project_message("proj-a", TODAY, "Complete", "no issue")

        assert message["content"] == ""
        embed = message["embeds"][0]
        assert embed["title"] == f"Apigee Backup Notification {TODAY}"
        assert embed["description"] == "**proj-a** (`apigee-proj-a`) - Complete\nReason: no issue"
        assert embed["color"] == COLOR_RED
        assert embed["footer"] == {"text": "Note : Project - Apigee - Status"}

    def test_project_message_mentions_tags(self):
        sender = DiscordSender(DISCORD_URL, tag_ids=["111", "222"])
        embed = sender.build_project_message("proj-a", TODAY, "Failed", "quota exceeded")["embeds"][0]

        assert embed["description"].endswith("Reason: quota exceeded\n\n<@111> <@222>")

    def test_empty_reason_becomes_no_issue(self):
        embed = DiscordSender(DISCORD_URL).build_project_message("proj-a", TODAY, "Complete", "")["embeds"][0]
        assert "Reason: no issue" in embed["description"]

    def test_summary_has_one_line_per_outcome_and_no_tags(self):
        sender = DiscordSender(DISCORD_URL, tag_ids=["111"])
        outcomes = [BackupOutcome("proj-a"), BackupOutcome("proj-b", "Failed", "quota exceeded")]

        embed = sender.build_summary_message(outcomes, TODAY)["embeds"][0]

        assert embed["title"] == f"Apigee Backup Summary {TODAY}"
        assert embed["description"].splitlines() == [
            f"**Apigee Backup Summary {TODAY}**",
            "* **proj-a** - Complete (`no issue`)",
            "* **proj-b** - Failed (`quota exceeded`)",
        ]
        assert embed["color"] == COLOR_GREEN
        assert "<@111>" not in embed["description"]


class TestWorkspaceMessages:

    def test_project_message(self):
        text = WorkspaceSender.build_project_message("proj-a", TODAY, "Failed", "quota exceeded")["text"]

        assert text.startswith(f"*Apigee Daily Backup {TODAY}*\n\n")
        assert text.endswith("| `proj-a` | `apigee-proj-a` | `Failed` | `quota exceeded` |")

    def test_summary_rows(self):
        outcomes = [BackupOutcome("proj-a"), BackupOutcome("proj-b", "Failed", "boom")]
        text = WorkspaceSender.build_summary_message(outcomes, TODAY)["text"]

        assert text.startswith(f"*Apigee Daily Backup Summary {TODAY}*")
        assert "| `proj-a` | `Complete` | `no issue` |\n" in text
        assert text.endswith("| `proj-b` | `Failed` | `boom` |\n")


class TestDelivery:

    def test_discord_success_is_204(self):
        session = session_with_status(204)
        sender = DiscordSender(DISCORD_URL, session=session)

        assert sender.send_project_status("proj-a", TODAY, "Complete", "no issue")
        args, kwargs = session.post.call_args
        assert args == (DISCORD_URL,)
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert kwargs["json"]["embeds"][0]["title"] == f"Apigee Backup Notification {TODAY}"

    def test_workspace_success_is_200(self):
        assert WorkspaceSender(WORKSPACE_URL, session=session_with_status(200)).send_summary([], TODAY)
        assert not WorkspaceSender(WORKSPACE_URL, session=session_with_status(204)).send_summary([], TODAY)

    def test_unexpected_status_is_not_raised(self):
        sender = DiscordSender(DISCORD_URL, session=session_with_status(500))
        assert sender.send_project_status("proj-a", TODAY, "Complete", "no issue") is False

    def test_network_error_is_not_raised(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        assert WorkspaceSender(WORKSPACE_URL, session=session).send_summary([], TODAY) is False

    def test_disabled_sender_makes_no_call(self):
        session = MagicMock()
        assert DiscordSender("", session=session).send_project_status("proj-a", TODAY, "Complete", "") is False
        session.post.assert_not_called()

    def test_defaults_to_module_level_requests(self):
        with patch("apigee_backup.notification.webhook_sender.requests.post") as post:
            post.return_value.status_code = 200
            assert WorkspaceSender(WORKSPACE_URL, timeout=3).send_summary([], TODAY)

        assert post.call_args.kwargs["timeout"] == 3


class TestNotificationDispatcher:

    def test_fans_out_to_enabled_senders_only(self):
        session = session_with_status(204)
        dispatcher = NotificationDispatcher([
            DiscordSender(DISCORD_URL, session=session),
            WorkspaceSender("", session=session),
        ])

        dispatcher.notify_project("proj-a", TODAY, "Complete")

        assert session.post.call_count == 1

    def test_summary_uses_clock_date(self, clock):
        session = session_with_status(200)
        dispatcher = NotificationDispatcher([WorkspaceSender(WORKSPACE_URL, session=session)], clock=clock)

        dispatcher.notify_summary([BackupOutcome("proj-a")])

        assert TODAY in session.post.call_args.kwargs["json"]["text"]

    def test_from_config(self, config):
        dispatcher = NotificationDispatcher.from_config(config)

        assert [type(s) for s in dispatcher.senders] == [DiscordSender, WorkspaceSender]
        assert dispatcher.senders[0].tag_ids == ("111", "222")
