"""
Notification module for Discord and Google Workspace webhooks.
"""

from .webhook_sender import DiscordSender, WorkspaceSender, WebhookSender, NotificationDispatcher

__all__ = ["DiscordSender", "WorkspaceSender", "WebhookSender", "NotificationDispatcher"]
