"""
Notification delivery for SEO Workspace
"""
import logging
import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Optional

from database import DatabaseManager
from models import NOTIFICATION_SETTINGS
from config import config as default_config

logger = logging.getLogger(__name__)
notification_logger = logging.getLogger('notifications')

GRANTED = "granted"
DENIED = "denied"
DEFAULT = "default"


@dataclass
class Notification:
    """A delivered system notification"""
    title: str
    body: str
    icon: str
    category: Optional[str]
    timestamp: str


class NotificationCapability:
    """Permission state plus a way to show notifications.

    Passed explicitly into NotificationService so tests can substitute their own.
    """

    supported = True

    def __init__(self, permission: str = DEFAULT):
        self.permission = permission

    def request(self) -> str:
        """Ask for permission once and remember the answer"""
        raise NotImplementedError

    def show(self, notification: Notification):
        raise NotImplementedError


class LogNotifier(NotificationCapability):
    """Shows notifications through the 'notifications' logger and keeps an outbox"""

    def __init__(self, permission: str = DEFAULT, auto_grant: bool = True):
        super().__init__(permission)
        self.auto_grant = auto_grant
        self.outbox: List[Notification] = []

    def request(self) -> str:
        if self.permission == DEFAULT:
            self.permission = GRANTED if self.auto_grant else DENIED
        return self.permission

    def show(self, notification: Notification):
        self.outbox.append(notification)
        notification_logger.info(f"{notification.title} - {notification.body}")


class EmailNotifier(NotificationCapability):
    """Delivers notifications by email once SMTP settings are configured"""

    def __init__(self):
        super().__init__(DEFAULT)
        self.email_config = None

    def configure_email_alerts(self, smtp_server: str, smtp_port: int,
                               username: str, password: str, recipients: List[str]):
        """Configure email notifications"""
        self.email_config = {
            'smtp_server': smtp_server,
            'smtp_port': smtp_port,
            'username': username,
            'password': password,
            'recipients': recipients
        }

    def request(self) -> str:
        self.permission = GRANTED if self.email_config else DENIED
        return self.permission

    def show(self, notification: Notification):
        msg = MIMEMultipart()
        msg['From'] = self.email_config['username']
        msg['To'] = ', '.join(self.email_config['recipients'])
        msg['Subject'] = f"SEO Workspace - {notification.title}"
        msg.attach(MIMEText(f"{notification.body}\n\nSent: {notification.timestamp}", 'plain'))

        try:
            server = smtplib.SMTP(self.email_config['smtp_server'], self.email_config['smtp_port'])
            try:
                server.starttls()
                server.login(self.email_config['username'], self.email_config['password'])
                server.sendmail(self.email_config['username'], self.email_config['recipients'], msg.as_string())
            finally:
                server.quit()
            logger.info(f"Email notification sent: {notification.title}")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email notification: {e}")


class NotificationService:
    """Gates notifications on user settings and the capability's permission"""

    def __init__(self, db_manager: DatabaseManager, capability: NotificationCapability,
                 icon: str = None):
        self.db_manager = db_manager
        self.capability = capability
        self.icon = icon or default_config.notification_icon

    def request_permission(self) -> bool:
        """Idempotent: no-op when already granted, False when unsupported"""
        if not self.capability.supported:
            logger.warning("This environment does not support system notifications")
            return False

        if self.capability.permission == GRANTED:
            return True

        return self.capability.request() == GRANTED

    def send(self, title: str, body: str = "", category: str = None) -> bool:
        """Show a notification unless its category is switched off; True when delivered"""
        if category:
            flag = NOTIFICATION_SETTINGS.get(category)
            if flag and not self.db_manager.get_settings().is_enabled(flag):
                logger.debug(f"Notification '{title}' suppressed, {flag} is off")
                return False

        if self.capability.permission != GRANTED:
            logger.debug(f"Notification '{title}' not shown, permission is {self.capability.permission}")
            return False

        self.capability.show(Notification(
            title=title,
            body=body,
            icon=self.icon,
            category=category,
            timestamp=datetime.now().isoformat(),
        ))
        return True
