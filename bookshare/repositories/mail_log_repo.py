from bookshare.extensions import db
from bookshare.models.mail_log import MailLog


class MailLogRepo:
    @staticmethod
    def log(entry: MailLog, commit: bool = False):
        db.session.add(entry)
        if commit:
            db.session.commit()
        return entry

    @staticmethod
    def list_by_kind(kind: str):
        return MailLog.query.filter_by(kind=kind).order_by(MailLog.id.asc()).all()
