from bookshare.services.borrow_service import BorrowService


def iso(value):
    return value.isoformat() if value else None


def user_public(u):
    if not u:
        return None
    return {
        "id": u.id,
        "name": u.name,
        "bio": u.bio,
        "avatar_url": u.avatar_url,
        "city": u.city,
        "neighborhood": u.neighborhood,
        "lat": u.lat,
        "lng": u.lng,
        "books_shared": u.books_shared,
        "books_borrowed": u.books_borrowed,
        "rating": u.rating,
        "rating_count": u.rating_count,
        "created_at": iso(u.created_at),
    }


def user_private(u):
    data = user_public(u)
    data["email"] = u.email
    return data


def book_json(b, distance_km=None, detail: bool = False):
    owner = b.owner
    data = {
        "id": b.id,
        "owner_id": b.owner_id,
        "owner_name": owner.name if owner else None,
        "owner_avatar": owner.avatar_url if owner else None,
        "title": b.title,
        "author": b.author,
        "isbn": b.isbn,
        "cover_url": b.cover_url,
        "description": b.description,
        "genre": b.genre,
        "language": b.language,
        "condition": b.condition,
        "status": b.status,
        "max_borrow_days": b.max_borrow_days,
        "lat": b.lat,
        "lng": b.lng,
        "city": b.city,
        "neighborhood": b.neighborhood,
        "created_at": iso(b.created_at),
        "updated_at": iso(b.updated_at),
        "distance_km": distance_km,
    }
    if detail:
        data.update({
            "owner_bio": owner.bio if owner else None,
            "owner_city": owner.city if owner else None,
            "owner_neighborhood": owner.neighborhood if owner else None,
            "owner_rating": owner.rating if owner else None,
            "owner_books_shared": owner.books_shared if owner else None,
        })
    return data


def request_json(r, book_title=None, book_cover=None, requester_name=None, owner_name=None):
    if book_title is None and r.book:
        book_title, book_cover = r.book.title, r.book.cover_url
    if requester_name is None and r.requester:
        requester_name = r.requester.name
    if owner_name is None and r.owner:
        owner_name = r.owner.name
    return {
        "id": r.id,
        "book_id": r.book_id,
        "requester_id": r.requester_id,
        "owner_id": r.owner_id,
        "status": r.status,
        "message": r.message,
        "borrow_days": r.borrow_days,
        "requested_at": iso(r.requested_at),
        "responded_at": iso(r.responded_at),
        "borrowed_at": iso(r.borrowed_at),
        "due_date": iso(r.due_date),
        "returned_at": iso(r.returned_at),
        "is_overdue": BorrowService.is_overdue(r),
        "book_title": book_title,
        "book_cover": book_cover,
        "requester_name": requester_name,
        "owner_name": owner_name,
    }


def message_json(m):
    return {
        "id": m.id,
        "sender_id": m.sender_id,
        "receiver_id": m.receiver_id,
        "book_id": m.book_id,
        "borrow_request_id": m.borrow_request_id,
        "content": m.content,
        "read": bool(m.read),
        "created_at": iso(m.created_at),
    }


def invite_json(i, with_token: bool = False):
    invited = i.invited_user
    data = {
        "id": i.id,
        "email": i.email,
        "status": i.status,
        "invited_user_id": i.invited_user_id,
        "invited_name": invited.name if invited else None,
        "invited_avatar": invited.avatar_url if invited else None,
        "invited_city": invited.city if invited else None,
        "created_at": iso(i.created_at),
        "accepted_at": iso(i.accepted_at),
    }
    if with_token:
        data["token"] = i.token
    return data


def review_json(rv):
    reviewer = rv.reviewer
    return {
        "id": rv.id,
        "reviewer_id": rv.reviewer_id,
        "reviewer_name": reviewer.name if reviewer else None,
        "reviewed_id": rv.reviewed_id,
        "borrow_request_id": rv.borrow_request_id,
        "rating": rv.rating,
        "comment": rv.comment,
        "created_at": iso(rv.created_at),
    }
