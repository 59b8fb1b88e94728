#!/usr/bin/env python3
"""
Webhook senders for backup notifications.
Discord receives embeds, Google Workspace receives a plain text table.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence

import requests

logger = logging.getLogger(__name__)

DEFAULT_REASON = "no issue"

COLOR_RED = 16711680
COLOR_GREEN = 65280

def _reason(reason: Optional[str]) -> str:
    return reason or DEFAULT_REASON

class WebhookSender:
    """
    Base class for a single webhook sink.

    Delivery is fire-and-forget: errors and unexpected status codes are
    logged and reported through the boolean return value only.
    """

    # Sink name used in log lines
    name = "webhook"
    # Status code the service answers with on success
    success_status = 200

    def __init__(self, webhook_url: str, timeout: int = 10, session: Optional[requests.Session] = None):
        """
        Args:
            webhook_url: Target URL, empty disables the sink
            timeout: Request timeout in seconds
            session: Optional requests session, module level requests otherwise
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.http = session or requests

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def _post(self, payload: Dict[str, Any], what: str) -> bool:
        """Send a JSON payload, never raises"""
        if not self.enabled:
            return False

        try:
            logger.debug(f"Sending {what} via {self.name}")
            response = self.http.post(
                self.webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout
            )

            if response.status_code == self.success_status:
                logger.info(f"{self.name} {what} sent")
                return True

            logger.warning(
                f"Failed to send {self.name} {what}, "
                f"received status code: {response.status_code}"
            )
            return False

        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send {self.name} {what}: {e}")
            return False

    def send_project_status(self, project: str, date: str, status: str, reason: str) -> bool:
        raise NotImplementedError

    def send_summary(self, outcomes: Sequence[Any], date: str) -> bool:
        raise NotImplementedError

class DiscordSender(WebhookSender):
    """Discord webhook, answers 204 on success"""

    name = "Discord"
    success_status = 204

    def __init__(
        self,
        webhook_url: str,
        tag_ids: Iterable[str] = (),
        timeout: int = 10,
        session: Optional[requests.Session] = None
    ):
        super().__init__(webhook_url, timeout=timeout, session=session)
        self.tag_ids = tuple(tag_ids)

    @staticmethod
    def _embed_message(title: str, description: str, color: int, footer: str) -> Dict[str, Any]:
        return {
            "content": "",
            "embeds": [{
                "title": title,
                "description": description,
                "color": color,
                "footer": {"text": footer}
            }]
        }

    def build_project_message(self, project: str, date: str, status: str, reason: str) -> Dict[str, Any]:
        content = f"**{project}** (`apigee-{project}`) - {status}\nReason: {_reason(reason)}"

        if self.tag_ids:
            tags = " ".join(f"<@{tag_id}>" for tag_id in self.tag_ids)
            content = f"{content}\n\n{tags}"

        return self._embed_message(
            title=f"Apigee Backup Notification {date}",
            description=content,
            color=COLOR_RED,
            footer="Note : Project - Apigee - Status"
        )

    def build_summary_message(self, outcomes: Sequence[Any], date: str) -> Dict[str, Any]:
        lines = [f"**Apigee Backup Summary {date}**"]
        for outcome in outcomes:
            lines.append(f"* **{outcome.project}** - {outcome.status} (`{_reason(outcome.reason)}`)")

        return self._embed_message(
            title=f"Apigee Backup Summary {date}",
            description="\n".join(lines),
            color=COLOR_GREEN,
            footer="Note : Project - Status - Reason"
        )

    def send_project_status(self, project: str, date: str, status: str, reason: str) -> bool:
        return self._post(self.build_project_message(project, date, status, reason), "notification")

    def send_summary(self, outcomes: Sequence[Any], date: str) -> bool:
        return self._post(self.build_summary_message(outcomes, date), "summary")

class WorkspaceSender(WebhookSender):
    """Google Workspace chat webhook, answers 200 on success"""

    name = "Google Workspace"
    success_status = 200

    @staticmethod
    def build_project_message(project: str, date: str, status: str, reason: str) -> Dict[str, str]:
        text = (
            f"*Apigee Daily Backup {date}*\n\n"
            f"*| `Project` | `Apigee-Orgs` | `Status` | `Reason` |*\n"
            f"|---|---|---|\n"
            f"| `{project}` | `apigee-{project}` | `{status}` | `{_reason(reason)}` |"
        )
        return {"text": text}

    @staticmethod
    def build_summary_message(outcomes: Sequence[Any], date: str) -> Dict[str, str]:
        text = (
            f"*Apigee Daily Backup Summary {date}*\n\n"
            f"*| `Project` | `Status` | `Reason` |*\n"
            f"|---|---|---|\n"
        )
        for outcome in outcomes:
            text += f"| `{outcome.project}` | `{outcome.status}` | `{_reason(outcome.reason)}` |\n"
        return {"text": text}

    def send_project_status(self, project: str, date: str, status: str, reason: str) -> bool:
        return self._post(self.build_project_message(project, date, status, reason), "notification")

    def send_summary(self, outcomes: Sequence[Any], date: str) -> bool:
        return self._post(self.build_summary_message(outcomes, date), "summary")

class NotificationDispatcher:
    """
    Fans notifications out to every enabled sink.

    Disabled sinks are skipped without any HTTP call.
    """

    def __init__(self, senders: Iterable[WebhookSender], clock=datetime.now):
        self.senders = [sender for sender in senders if sender.enabled]
        self.clock = clock

        if not self.senders:
            logger.info("No webhooks configured, notifications will be logged only")

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None, clock=datetime.now):
        """Build Discord and Workspace senders from a Config"""
        return cls(
            [
                DiscordSender(config.webhook_url, config.tag_ids, timeout=config.notify_timeout, session=session),
                WorkspaceSender(config.workspace_webhook_url, timeout=config.notify_timeout, session=session)
            ],
            clock=clock
        )

    def notify_project(self, project: str, date: str, status: str, reason: str = DEFAULT_REASON) -> None:
        """Send one per-project message to every sink"""
        logger.info(f"Notification [{status}] {project}: {_reason(reason)}")
        for sender in self.senders:
            sender.send_project_status(project, date, status, reason)

    def notify_summary(self, outcomes: Sequence[Any], date: Optional[str] = None) -> None:
        """Send the end of run summary to every sink"""
        date = date or self.clock().strftime("%Y-%m-%d")
        logger.info(f"Sending summary for {len(outcomes)} project(s)")
        for sender in self.senders:
            sender.send_summary(outcomes, date)
