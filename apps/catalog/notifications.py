"""
Notification relay: short lived toasts shown to the shopper.
"""

from django.contrib import messages
from django.db import models


class Severity(models.TextChoices):
    INFO = 'info', 'Info'
    SUCCESS = 'success', 'Success'
    WARNING = 'warning', 'Warning'
    ERROR = 'error', 'Error'


MESSAGE_LEVELS = {
    Severity.INFO: messages.INFO,
    Severity.SUCCESS: messages.SUCCESS,
    Severity.WARNING: messages.WARNING,
    Severity.ERROR: messages.ERROR,
}


class MessagesRelay:
    """Delivers notifications through django.contrib.messages."""

    def __init__(self, request):
        self.request = request

    def notify(self, message, severity=Severity.INFO):
        severity = Severity(severity)
        messages.add_message(
            self.request,
            MESSAGE_LEVELS[severity],
            message,
            extra_tags=severity.value,
        )
