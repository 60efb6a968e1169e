import pytest

from bookshare.errors import InvalidArgument, NotFound
from bookshare.extensions import db
from bookshare.models.message import Message
from bookshare.services.message_service import MessageService


@pytest.fixture
def people(make_user):
    return make_user("Alice"), make_user("Bob"), make_user("Carol")


def _read(message_id):
    return db.session.get(Message, message_id).read


def test_opening_thread_marks_only_incoming_as_read(people):
    alice, bob, carol = people
    from_bob = MessageService.send(bob.id, alice.id, "Is Dune still free?")
    from_alice = MessageService.send(alice.id, bob.id, "Yes!")
    carol_to_alice = MessageService.send(carol.id, alice.id, "Hi there")
    bob_to_carol = MessageService.send(bob.id, carol.id, "Unrelated")

    other, thread = MessageService.thread(alice.id, bob.id)

    assert other.id == bob.id
    assert [m.id for m in thread] == [from_bob.id, from_alice.id]
    assert _read(from_bob.id) is True
    # caller's own outgoing message stays unread for the receiver
    assert _read(from_alice.id) is False
    assert _read(carol_to_alice.id) is False
    assert _read(bob_to_carol.id) is False


def test_thread_returns_state_from_before_opening(people):
    alice, bob, _carol = people
    from_bob = MessageService.send(bob.id, alice.id, "Still free?")

    _other, first = MessageService.thread(alice.id, bob.id)
    assert [m.read for m in first] == [False]
    assert _read(from_bob.id) is True

    _other, again = MessageService.thread(alice.id, bob.id)
    assert [m.read for m in again] == [True]


def test_book_filter_narrows_thread_but_not_read_marking(people, make_book):
    alice, bob, _carol = people
    book = make_book(alice)
    tagged = MessageService.send(bob.id, alice.id, "About Dune", book_id=book.id)
    untagged = MessageService.send(bob.id, alice.id, "Hello")

    _other, thread = MessageService.thread(alice.id, bob.id, book_id=book.id)

    assert [m.id for m in thread] == [tagged.id]
    assert _read(tagged.id) is True
    assert _read(untagged.id) is True


def test_unread_count_and_inbox(people):
    alice, bob, carol = people
    MessageService.send(bob.id, alice.id, "one")
    MessageService.send(bob.id, alice.id, "two")
    MessageService.send(alice.id, carol.id, "to carol")
    latest = MessageService.send(carol.id, alice.id, "reply from carol")

    assert MessageService.unread_count(alice.id) == 3
    assert MessageService.unread_count(carol.id) == 1

    inbox = MessageService.inbox(alice.id)
    assert [c["other_id"] for c in inbox] == [carol.id, bob.id]
    assert inbox[0]["last_message"].id == latest.id
    assert inbox[0]["unread"] == 1
    assert inbox[1]["unread"] == 2
    assert inbox[1]["other"].name == "Bob"

    MessageService.thread(alice.id, bob.id)
    assert MessageService.unread_count(alice.id) == 1


def test_send_validation(people):
    alice, bob, _carol = people
    with pytest.raises(InvalidArgument):
        MessageService.send(alice.id, bob.id, "   ")
    with pytest.raises(InvalidArgument):
        MessageService.send(alice.id, None, "hi")
    with pytest.raises(InvalidArgument):
        MessageService.send(alice.id, alice.id, "hi me")
    with pytest.raises(NotFound):
        MessageService.send(alice.id, "ghost", "hi")
    with pytest.raises(NotFound):
        MessageService.send(alice.id, bob.id, "hi", book_id="no-book")


def test_thread_with_unknown_user(people):
    alice, _bob, _carol = people
    with pytest.raises(NotFound):
        MessageService.thread(alice.id, "ghost")
