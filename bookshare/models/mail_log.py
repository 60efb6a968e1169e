from bookshare.extensions import db
from bookshare.utils.timeutil import utcnow


class MailLog(db.Model):
    __tablename__ = "mail_logs"

    id = db.Column(db.Integer, primary_key=True)

    kind = db.Column(db.String(50), nullable=False)  # invite
    to_email = db.Column(db.String(255), nullable=True)
    subject = db.Column(db.String(255), nullable=True)

    success = db.Column(db.Boolean, nullable=False, default=False)
    error = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
