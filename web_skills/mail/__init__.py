"""Disposable mailbox skills (register, send, check)."""

from .mailtm import (
    MailboxResult,
    RegistrationResult,
    SendResult,
    check_mail,
    register_email,
    send_mail,
)

__all__ = [
    "MailboxResult",
    "RegistrationResult",
    "SendResult",
    "check_mail",
    "register_email",
    "send_mail",
]
