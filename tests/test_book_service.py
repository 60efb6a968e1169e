import pytest
import requests

from bookshare.errors import Conflict, Forbidden, InvalidArgument, NotFound
from bookshare.extensions import db
from bookshare.models.borrow_request import BorrowRequest
from bookshare.models.message import Message
from bookshare.models.user import User
from bookshare.services import metadata_service
from bookshare.services.book_service import BookService
from bookshare.services.borrow_service import BorrowService
from bookshare.services.message_service import MessageService
from bookshare.utils.geo import distance_km, haversine_km


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


OPEN_LIBRARY_DUNE = {
    "ISBN:9780441013593": {
        "title": "Dune",
        "authors": [{"name": "Frank Herbert"}],
        "subtitle": "Deluxe edition",
        "cover": {"medium": "https://covers.example/m.jpg", "large": "https://covers.example/l.jpg"},
    }
}


@pytest.fixture
def alice(make_user):
    return make_user("Alice", city="Lisbon", neighborhood="Alfama", lat=38.71, lng=-9.13)


def test_create_copies_owner_location_and_counts(alice, make_book):
    book = make_book(alice, genre="Sci-Fi")

    assert book.status == "available"
    assert book.max_borrow_days == 14
    assert book.language == "English"
    assert book.condition == "Good"
    assert (book.city, book.neighborhood, book.lat, book.lng) == ("Lisbon", "Alfama", 38.71, -9.13)
    assert db.session.get(User, alice.id).books_shared == 1

    # location is a snapshot, not a live view
    alice.city = "Porto"
    db.session.commit()
    assert BookService.get_book(book.id).city == "Lisbon"


def test_create_requires_title_and_author(alice):
    with pytest.raises(InvalidArgument):
        BookService.create_book(alice.id, {"title": "Dune"})
    with pytest.raises(InvalidArgument):
        BookService.create_book(alice.id, {"title": "Dune", "author": "F", "borrow_days": 0})
    assert db.session.get(User, alice.id).books_shared == 0


def test_isbn_lookup_fills_blank_fields(app, alice, monkeypatch):
    app.config["ISBN_LOOKUP_ENABLED"] = True
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(params)
        return FakeResponse(OPEN_LIBRARY_DUNE)

    monkeypatch.setattr(metadata_service.requests, "get", fake_get)
    book = BookService.create_book(alice.id, {"isbn": "978-0441013593", "title": "My Dune"})

    assert calls[0]["bibkeys"] == "ISBN:9780441013593"
    assert book.title == "My Dune"
    assert book.author == "Frank Herbert"
    assert book.description == "Deluxe edition"
    assert book.cover_url == "https://covers.example/l.jpg"
    assert book.isbn == "9780441013593"


def test_isbn_lookup_failure_never_blocks_creation(app, alice, monkeypatch):
    app.config["ISBN_LOOKUP_ENABLED"] = True

    def offline(*_a, **_k):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(metadata_service.requests, "get", offline)
    book = BookService.create_book(alice.id, {"isbn": "9780441013593", "title": "Dune", "author": "Herbert"})
    assert book.description == ""
    assert book.cover_url == ""


def test_lookup_isbn_handles_missing_and_bad_payloads(app, monkeypatch):
    monkeypatch.setattr(metadata_service.requests, "get", lambda *a, **k: FakeResponse({}))
    assert metadata_service.MetadataService.lookup_isbn("123") is None

    monkeypatch.setattr(metadata_service.requests, "get", lambda *a, **k: FakeResponse(None, status=503))
    assert metadata_service.MetadataService.lookup_isbn("123") is None

    assert metadata_service.MetadataService.lookup_isbn("") is None


def test_list_books_filters(alice, make_user, make_book):
    bob = make_user("Bob")
    make_book(alice, title="Dune", author="Frank Herbert", genre="Sci-Fi")
    make_book(alice, title="Emma", author="Jane Austen", genre="Classic")
    make_book(bob, title="Children of Dune", author="Frank Herbert", genre="Sci-Fi")

    assert {b.title for b in BookService.list_books(q="dune")} == {"Dune", "Children of Dune"}
    assert {b.title for b in BookService.list_books(q="austen")} == {"Emma"}
    assert {b.title for b in BookService.list_books(genre="Classic")} == {"Emma"}
    assert {b.title for b in BookService.list_books(owner_id=bob.id)} == {"Children of Dune"}
    assert len(BookService.list_books()) == 3
    assert BookService.list_books(status="borrowed") == []


def test_update_is_owner_only(alice, make_user, make_book):
    bob = make_user("Bob")
    book = make_book(alice)
    with pytest.raises(Forbidden):
        BookService.update_book(bob.id, book.id, {"title": "Mine now"})
    with pytest.raises(InvalidArgument):
        BookService.update_book(alice.id, book.id, {"unknown": 1})

    updated = BookService.update_book(alice.id, book.id, {"genre": "Sci-Fi", "max_borrow_days": 7})
    assert updated.genre == "Sci-Fi"
    assert updated.max_borrow_days == 7


def test_manual_status_change_rules(alice, make_user, make_book):
    bob = make_user("Bob")
    book = make_book(alice)

    with pytest.raises(InvalidArgument):
        BookService.update_book(alice.id, book.id, {"status": "lost"})

    # no request holds the book, owner may take it off the shelf
    assert BookService.update_book(alice.id, book.id, {"status": "reserved"}).status == "reserved"
    BookService.update_book(alice.id, book.id, {"status": "available"})

    req = BorrowService.create_request(bob.id, book.id)
    BorrowService.approve(alice.id, req.id)
    with pytest.raises(Conflict):
        BookService.update_book(alice.id, book.id, {"status": "available"})
    assert BookService.get_book(book.id).status == "reserved"


def test_delete_book(alice, make_user, make_book):
    bob = make_user("Bob")
    book = make_book(alice)
    req = BorrowService.create_request(bob.id, book.id)
    msg = MessageService.send(bob.id, alice.id, "About this one", book_id=book.id, borrow_request_id=req.id)

    with pytest.raises(Forbidden):
        BookService.delete_book(bob.id, book.id)

    BookService.delete_book(alice.id, book.id)

    with pytest.raises(NotFound):
        BookService.get_book(book.id)
    assert BorrowRequest.query.count() == 0
    kept = db.session.get(Message, msg.id)
    assert kept.book_id is None
    assert kept.borrow_request_id is None
    assert db.session.get(User, alice.id).books_shared == 0


def test_delete_refused_while_lent(alice, make_user, make_book):
    bob = make_user("Bob")
    book = make_book(alice)
    req = BorrowService.create_request(bob.id, book.id)
    BorrowService.approve(alice.id, req.id)
    BorrowService.mark_borrowed(alice.id, req.id)

    with pytest.raises(Conflict):
        BookService.delete_book(alice.id, book.id)


def test_list_books_nearest_first(make_user, make_book):
    berlin = make_user("Berta", lat=52.52, lng=13.40)
    nyc = make_user("Nora", lat=40.71, lng=-74.0)
    nowhere = make_user("Nemo")
    make_book(nowhere, title="Lost book")
    make_book(berlin, title="Near book")
    make_book(nyc, title="Far book")

    titles = [b.title for b in BookService.list_books(lat=52.5, lng=13.4)]
    assert titles == ["Near book", "Far book", "Lost book"]

    # one coordinate alone does not switch to distance order
    assert [b.title for b in BookService.list_books(lat=52.5)] == [b.title for b in BookService.list_books()]


def test_distance_uses_owner_location_and_treats_zero_as_unknown(make_user, make_book):
    berlin = make_user("Berta", lat=52.52, lng=13.40)
    book = make_book(berlin)

    assert distance_km(book, 52.5, 13.4) == 2.2
    assert distance_km(book, None, 13.4) is None
    assert distance_km(book, 0, 0) is None

    berlin.lat = 0
    assert distance_km(book, 52.5, 13.4) is None
    assert 6370 < haversine_km(52.52, 13.40, 40.71, -74.0) < 6400
