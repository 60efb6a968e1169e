import uuid

from flask import current_app
from sqlalchemy.exc import IntegrityError

from bookshare.errors import Conflict, InvalidArgument, NotFound, Unauthorized
from bookshare.extensions import db
from bookshare.models.invite import INVITE_ACCEPTED, INVITE_JOINED, INVITE_PENDING, Invite
from bookshare.repositories.contact_repo import ContactRepo
from bookshare.repositories.invite_repo import InviteRepo
from bookshare.repositories.user_repo import UserRepo
from bookshare.services.mail_service import MailService
from bookshare.utils.timeutil import utcnow
from bookshare.utils.validators import looks_like_email, normalize_email

MAX_INVITES_PER_CALL = 20


def new_invite_token() -> str:
    return uuid.uuid4().hex + uuid.uuid4().hex


class InviteService:
    """
    Invites and the contact edges they produce.

    An address that already has an account is linked straight away
    (status ``joined``); anything else waits for a token redemption.
    """

    @staticmethod
    def create_invites(caller_id: str, emails):
        inviter = UserRepo.get_by_id(caller_id)
        if not inviter:
            raise Unauthorized("Unknown user")
        if not isinstance(emails, list) or not emails:
            raise InvalidArgument("No emails provided")

        created = []
        seen = set()
        try:
            for raw in emails[:MAX_INVITES_PER_CALL]:
                email = normalize_email(raw)
                if not looks_like_email(email) or email == inviter.email or email in seen:
                    continue
                seen.add(email)
                if InviteRepo.exists_for(inviter.id, email):
                    continue

                existing = UserRepo.get_by_email(email)
                invite = Invite(
                    inviter_id=inviter.id,
                    email=email,
                    token=new_invite_token(),
                    status=INVITE_JOINED if existing else INVITE_PENDING,
                    invited_user_id=existing.id if existing else None,
                )
                InviteRepo.add(invite)
                if existing:
                    ContactRepo.ensure(inviter.id, existing.id)
                created.append(invite)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise Conflict("Invite already exists")
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[invite] {len(created)} invites created by {caller_id}")

        if current_app.config.get("INVITE_MAIL_ENABLED"):
            pending = [i for i in created if i.status == INVITE_PENDING]
            for invite in pending:
                MailService.send_invite_mail(invite, inviter)
            if pending:
                db.session.commit()

        return created

    @staticmethod
    def lookup_invite(token: str):
        if not token:
            raise InvalidArgument("Token required")
        invite = InviteRepo.get_by_token(token)
        if not invite:
            raise NotFound("Invite not found")
        return invite

    @staticmethod
    def accept_invite(caller_id: str, token: str):
        if not caller_id:
            raise Unauthorized("Login required")
        if not token:
            raise InvalidArgument("token required")

        try:
            invite = InviteRepo.get_by_token(token)
            if not invite:
                raise NotFound("Invite not found")
            if invite.status == INVITE_ACCEPTED:
                raise Conflict("Invite already accepted")
            if invite.inviter_id == caller_id:
                raise InvalidArgument("Cannot accept your own invite")

            # guarded update: a concurrent accept loses here
            if not InviteRepo.mark_accepted(invite.id, caller_id, utcnow()):
                raise Conflict("Invite already accepted")
            ContactRepo.ensure(invite.inviter_id, caller_id)
            inviter_id = invite.inviter_id
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[invite] {token[:8]}... accepted by {caller_id}")
        return UserRepo.get_by_id(inviter_id)

    @staticmethod
    def list_invites(caller_id: str):
        return InviteRepo.list_by_inviter(caller_id)

    @staticmethod
    def list_contacts(caller_id: str):
        """(user, connected_at) for every contact of the caller, by name."""
        rows = []
        for contact in ContactRepo.list_for(caller_id):
            other_id = contact.user_b if contact.user_a == caller_id else contact.user_a
            other = UserRepo.get_by_id(other_id)
            if other:
                rows.append((other, contact.created_at))
        rows.sort(key=lambda r: (r[0].name or "").lower())
        return rows
