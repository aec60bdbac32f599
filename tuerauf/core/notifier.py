"""Admin notifications: every message is logged and, if configured, mailed to the admin."""

import logging
import smtplib
import ssl
from concurrent.futures import Future, ThreadPoolExecutor
from email.mime.text import MIMEText
from functools import lru_cache

from tuerauf.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Subject lines are cut to this length; the full text is in the body.
MAX_SUBJECT_LEN = 120


def _format(message: str, args: tuple[object, ...]) -> str:
    """Apply %-style arguments the way logging does; fall back to a plain join."""
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        return " ".join([message, *(str(a) for a in args)])


def _is_mail_configured(settings: Settings) -> bool:
    if not settings.MAIL_ENABLED:
        return False
    if not settings.SMTP_HOST or not settings.SMTP_FROM or not settings.ADMIN_MAIL_TO:
        return False
    return True


class LogAndMailNotifier:
    """
    Fire-and-forget notifier for administrative events (new users, changed pins,
    full serial id pool).

    notify() never raises: mail delivery runs on a single background worker and
    its failures are only logged.
    """

    def __init__(self, settings: Settings, executor: ThreadPoolExecutor | None = None) -> None:
        self._settings = settings
        self._mail_enabled = _is_mail_configured(settings)
        self._executor = executor
        if self._mail_enabled and self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="notify-mail")

    @property
    def mail_enabled(self) -> bool:
        return self._mail_enabled

    def notify(self, message: str, *args: object) -> Future | None:
        """
        Log the formatted message and queue it as admin mail.

        Returns the mail Future (useful for tests and shutdown), or None when no mail was queued.
        """
        text = _format(message, args)
        logger.info("notify: %s", text)
        if not self._mail_enabled or self._executor is None:
            return None
        try:
            future = self._executor.submit(self._send_mail, text)
        except RuntimeError as e:
            # Executor already shut down (interpreter exit).
            logger.warning("Notification mail not queued: %s", e)
            return None
        future.add_done_callback(_log_mail_failure)
        return future

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)

    def _send_mail(self, text: str) -> None:
        s = self._settings
        msg = MIMEText(text, "plain", "utf-8")
        msg["Subject"] = (s.MAIL_SUBJECT_PREFIX + text)[:MAX_SUBJECT_LEN]
        msg["From"] = s.SMTP_FROM
        msg["To"] = s.ADMIN_MAIL_TO
        password = s.SMTP_PASSWORD.get_secret_value() if s.SMTP_PASSWORD is not None else None

        if s.SMTP_PORT == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC, context=context) as server:
                if s.SMTP_USER and password:
                    server.login(s.SMTP_USER, password)
                server.sendmail(s.SMTP_FROM, [s.ADMIN_MAIL_TO], msg.as_string())
        else:
            with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC) as server:
                server.ehlo()
                server.starttls(context=ssl.create_default_context())
                if s.SMTP_USER and password:
                    server.login(s.SMTP_USER, password)
                server.sendmail(s.SMTP_FROM, [s.ADMIN_MAIL_TO], msg.as_string())
        logger.debug("Notification mail sent to %s", s.ADMIN_MAIL_TO)


def _log_mail_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Sending notification mail failed: %s", exc, exc_info=exc)


@lru_cache
def get_notifier() -> LogAndMailNotifier:
    """Return the process-wide notifier (safe to call from dependencies)."""
    return LogAndMailNotifier(get_settings())
