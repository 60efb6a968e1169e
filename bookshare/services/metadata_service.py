import requests
from flask import current_app

from bookshare.utils.validators import normalize_isbn


class MetadataService:
    """
    ISBN lookup against the Open Library books API.

    Best effort only: every failure is logged and turned into ``None`` so that
    book creation never depends on the remote service.
    """

    @staticmethod
    def lookup_isbn(isbn: str):
        isbn = normalize_isbn(isbn)
        if not isbn:
            return None

        key = f"ISBN:{isbn}"
        try:
            resp = requests.get(
                current_app.config["ISBN_LOOKUP_URL"],
                params={"bibkeys": key, "format": "json", "jscmd": "data"},
                timeout=current_app.config["ISBN_LOOKUP_TIMEOUT"],
            )
            resp.raise_for_status()
            entry = (resp.json() or {}).get(key)
        except (requests.RequestException, ValueError) as e:
            current_app.logger.warning(f"[metadata] lookup failed for {isbn}: {e}")
            return None

        if not isinstance(entry, dict):
            current_app.logger.info(f"[metadata] nothing found for {isbn}")
            return None

        authors = [a.get("name", "") for a in entry.get("authors") or [] if isinstance(a, dict)]
        cover = entry.get("cover") or {}
        notes = entry.get("notes")
        if isinstance(notes, dict):
            notes = notes.get("value")

        return {
            "isbn": isbn,
            "title": entry.get("title") or "",
            "author": ", ".join(a for a in authors if a),
            "description": notes or entry.get("subtitle") or "",
            "cover_url": cover.get("large") or cover.get("medium") or cover.get("small") or "",
        }
