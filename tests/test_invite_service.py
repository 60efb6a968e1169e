import pytest

from bookshare.errors import Conflict, InvalidArgument, NotFound, Unauthorized
from bookshare.extensions import db, mail
from bookshare.models.contact import Contact
from bookshare.models.invite import Invite
from bookshare.repositories.contact_repo import ContactRepo, canonical_pair
from bookshare.repositories.mail_log_repo import MailLogRepo
from bookshare.services.invite_service import InviteService


@pytest.fixture
def alice(make_user):
    return make_user("Alice")


def test_invite_existing_user_links_immediately(alice, make_user):
    carol = make_user("Carol", email="x@y.com")

    created = InviteService.create_invites(alice.id, ["X@Y.com "])

    assert len(created) == 1
    invite = created[0]
    assert invite.status == "joined"
    assert invite.email == "x@y.com"
    assert invite.invited_user_id == carol.id
    assert invite.accepted_at is None

    a, b = canonical_pair(alice.id, carol.id)
    assert Contact.query.filter_by(user_a=a, user_b=b).count() == 1
    assert Contact.query.count() == 1


def test_invite_unknown_address_waits_for_token(alice):
    created = InviteService.create_invites(alice.id, ["new@reader.org"])

    invite = created[0]
    assert invite.status == "pending"
    assert invite.invited_user_id is None
    assert len(invite.token) == 64
    assert "-" not in invite.token
    assert Contact.query.count() == 0


def test_invite_filters_and_dedupes(alice):
    emails = ["alice@example.com", "", "not-an-email", "a@b.com", "A@B.com", 42]
    created = InviteService.create_invites(alice.id, emails)
    assert [i.email for i in created] == ["a@b.com"]

    # a second call for the same address is a no-op
    assert InviteService.create_invites(alice.id, ["a@b.com"]) == []
    assert Invite.query.filter_by(inviter_id=alice.id).count() == 1


def test_invite_caps_batch_size(alice):
    emails = [f"friend{i}@example.com" for i in range(25)]
    created = InviteService.create_invites(alice.id, emails)
    assert len(created) == 20


def test_tokens_are_unique(alice):
    created = InviteService.create_invites(alice.id, [f"p{i}@example.com" for i in range(10)])
    assert len({i.token for i in created}) == 10


@pytest.mark.parametrize("emails", [None, [], "a@b.com"])
def test_invite_requires_email_list(alice, emails):
    with pytest.raises(InvalidArgument):
        InviteService.create_invites(alice.id, emails)


def test_accept_links_once_and_conflicts_on_repeat(alice, make_user):
    invite = InviteService.create_invites(alice.id, ["dan@example.com"])[0]
    token = invite.token
    dan = make_user("Dan")

    inviter = InviteService.accept_invite(dan.id, token)
    assert inviter.id == alice.id

    invite = Invite.query.filter_by(token=token).first()
    assert invite.status == "accepted"
    assert invite.invited_user_id == dan.id
    assert invite.accepted_at is not None

    with pytest.raises(Conflict):
        InviteService.accept_invite(dan.id, token)
    assert Contact.query.count() == 1


def test_accept_after_existing_contact_does_not_duplicate(alice, make_user):
    dan = make_user("Dan")
    invite = InviteService.create_invites(alice.id, ["dan-other@example.com"])[0]
    # edge already made from the other side
    InviteService.create_invites(dan.id, ["alice@example.com"])

    InviteService.accept_invite(dan.id, invite.token)
    assert Contact.query.count() == 1


def test_accept_errors(alice, make_user):
    invite = InviteService.create_invites(alice.id, ["eve@example.com"])[0]

    with pytest.raises(Unauthorized):
        InviteService.accept_invite(None, invite.token)
    with pytest.raises(InvalidArgument):
        InviteService.accept_invite(alice.id, "")
    with pytest.raises(NotFound):
        InviteService.accept_invite(alice.id, "no-such-token")
    with pytest.raises(InvalidArgument):
        InviteService.accept_invite(alice.id, invite.token)


def test_contacts_are_symmetric(alice, make_user):
    bob = make_user("Bob")
    carol = make_user("Carol")
    InviteService.create_invites(alice.id, ["bob@example.com", "carol@example.com"])

    assert [u.name for u, _ in InviteService.list_contacts(alice.id)] == ["Bob", "Carol"]
    assert [u.id for u, _ in InviteService.list_contacts(bob.id)] == [alice.id]
    assert [u.id for u, _ in InviteService.list_contacts(carol.id)] == [alice.id]
    assert Contact.query.count() == 2


def test_contact_repo_canonical_ordering(alice, make_user):
    bob = make_user("Bob")
    first, created = ContactRepo.ensure(bob.id, alice.id)
    assert created
    second, created_again = ContactRepo.ensure(alice.id, bob.id)
    assert not created_again
    assert second.id == first.id
    assert first.user_a < first.user_b
    db.session.commit()


def test_lookup_and_list_invites(alice, make_user):
    make_user("Zed", email="zed@example.com")
    InviteService.create_invites(alice.id, ["zed@example.com", "new@example.com"])

    invites = InviteService.list_invites(alice.id)
    assert {i.email for i in invites} == {"zed@example.com", "new@example.com"}
    joined = next(i for i in invites if i.status == "joined")
    assert joined.invited_user.name == "Zed"

    pending = next(i for i in invites if i.status == "pending")
    assert InviteService.lookup_invite(pending.token).email == "new@example.com"
    with pytest.raises(NotFound):
        InviteService.lookup_invite("unknown")
    with pytest.raises(InvalidArgument, match="Token required"):
        InviteService.lookup_invite(None)
    with pytest.raises(InvalidArgument):
        InviteService.lookup_invite("")


def test_invite_mail_is_sent_and_logged(app, alice, make_user):
    app.config["INVITE_MAIL_ENABLED"] = True
    make_user("Known", email="known@example.com")

    with mail.record_messages() as outbox:
        InviteService.create_invites(alice.id, ["fresh@example.com", "known@example.com"])

    assert len(outbox) == 1
    assert outbox[0].recipients == ["fresh@example.com"]
    assert "token=" in outbox[0].body

    logs = MailLogRepo.list_by_kind("invite")
    assert len(logs) == 1
    assert logs[0].success is True
    assert logs[0].to_email == "fresh@example.com"


def test_invite_mail_failure_keeps_invite(app, alice, monkeypatch):
    app.config["INVITE_MAIL_ENABLED"] = True

    def broken_send(_msg):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(mail, "send", broken_send)
    created = InviteService.create_invites(alice.id, ["fresh@example.com"])

    assert created[0].status == "pending"
    assert Invite.query.count() == 1
    log = MailLogRepo.list_by_kind("invite")[0]
    assert log.success is False
    assert "smtp down" in log.error
