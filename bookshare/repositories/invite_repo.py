from bookshare.extensions import db
from bookshare.models.invite import INVITE_ACCEPTED, Invite


class InviteRepo:
    @staticmethod
    def get_by_token(token: str):
        return Invite.query.filter_by(token=token).first()

    @staticmethod
    def exists_for(inviter_id: str, email: str) -> bool:
        return Invite.query.filter_by(inviter_id=inviter_id, email=email).first() is not None

    @staticmethod
    def list_by_inviter(inviter_id: str):
        return (
            Invite.query.filter_by(inviter_id=inviter_id)
            .order_by(Invite.created_at.desc(), Invite.id.desc())
            .all()
        )

    @staticmethod
    def add(invite: Invite):
        db.session.add(invite)
        return invite

    @staticmethod
    def mark_accepted(invite_id: str, user_id: str, accepted_at) -> bool:
        count = Invite.query.filter(
            Invite.id == invite_id,
            Invite.status != INVITE_ACCEPTED,
        ).update(
            {"status": INVITE_ACCEPTED, "invited_user_id": user_id, "accepted_at": accepted_at},
            synchronize_session=False,
        )
        return count == 1
