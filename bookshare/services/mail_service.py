# bookshare/services/mail_service.py
from __future__ import annotations

from flask import current_app
from flask_mail import Message

from bookshare.extensions import mail
from bookshare.models.mail_log import MailLog
from bookshare.repositories.mail_log_repo import MailLogRepo
from bookshare.utils.timeutil import utcnow


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            current_app.logger.warning(f"[mail] send to {to_email} failed: {e}")
            return False, str(e)

    @staticmethod
    def log_mail(
        kind: str,
        to_email: str | None,
        subject: str,
        success: bool,
        error: str | None = None,
        commit: bool = False,
    ) -> MailLog:
        row = MailLog(
            kind=kind,
            to_email=to_email,
            subject=subject,
            success=bool(success),
            error=(error or None) and error[:500],
            created_at=utcnow(),
        )
        return MailLogRepo.log(row, commit=commit)

    @staticmethod
    def invite_link(token: str) -> str:
        base = current_app.config.get("INVITE_BASE_URL", "").rstrip("/")
        return f"{base}?token={token}"

    @staticmethod
    def send_invite_mail(invite, inviter) -> bool:
        """
        Invitation with the accept link, logged to mail_logs.
        commit=False: the caller commits once for the whole batch.
        """
        inviter_name = getattr(inviter, "name", None) or "A friend"
        subject = f"{inviter_name} invited you to BookShare"
        body = (
            f"Hi,\n\n"
            f"{inviter_name} wants to share books with you on BookShare.\n"
            f"Join here: {MailService.invite_link(invite.token)}\n"
        )

        ok, err = MailService.send_email(invite.email, subject, body)
        MailService.log_mail(
            kind="invite",
            to_email=invite.email,
            subject=subject,
            success=ok,
            error=err,
            commit=False,
        )
        return ok
