from bookshare.extensions import db
from bookshare.models.user import new_id
from bookshare.utils.timeutil import utcnow

INVITE_PENDING = "pending"
INVITE_ACCEPTED = "accepted"
# target email was already registered when the invite was made
INVITE_JOINED = "joined"


class Invite(db.Model):
    __tablename__ = "invites"
    __table_args__ = (
        db.UniqueConstraint("inviter_id", "email", name="uq_invites_inviter_email"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)

    inviter_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=INVITE_PENDING)
    invited_user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    accepted_at = db.Column(db.DateTime, nullable=True)

    inviter = db.relationship("User", foreign_keys=[inviter_id])
    invited_user = db.relationship("User", foreign_keys=[invited_user_id])
