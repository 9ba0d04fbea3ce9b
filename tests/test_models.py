from datetime import date

from locallibrary.author import Author
from locallibrary.book import Book
from locallibrary.bookinstance import BookInstance
from locallibrary.genre import Genre


def test_author_derived_fields():
    author = Author("Isaac", "Asimov", date(1920, 1, 2), date(1992, 4, 6), id="abc")
    assert author.name == "Asimov, Isaac"
    assert author.url == "/catalog/author/abc"
    assert author.lifespan == "1920 - 1992"
    assert author.date_of_birth_formatted == "Jan 2, 1920"


def test_author_fallbacks():
    author = Author("Bob", "")
    assert author.name == ""
    assert author.lifespan == "N/A - Present"
    assert author.date_of_death_formatted == ""


def test_author_round_trip_through_document():
    doc = {"_id": "a1", **Author("Ben", "Bova", date(1932, 11, 8)).to_dict()}
    assert doc["date_of_birth"] == "1932-11-08"
    author = Author.from_dict(doc)
    assert author.id == "a1"
    assert author.date_of_birth == date(1932, 11, 8)


def test_book_from_populated_document():
    book = Book.from_dict({
        "_id": "b1",
        "title": "Kindred",
        "author": {"_id": "a1", "first_name": "Octavia", "family_name": "Butler"},
        "summary": "s",
        "isbn": "1",
        "genre": [{"_id": "g1", "name": "Sci-Fi"}, "g2"],
    })
    assert book.author.name == "Butler, Octavia"
    assert book.author_id == "a1"
    assert book.genre_ids == ["g1", "g2"]
    assert book.to_dict()["genre"] == ["g1", "g2"]
    assert book.url == "/catalog/book/b1"


def test_genre_url():
    assert Genre("Fantasy", id="g1").url == "/catalog/genre/g1"


def test_bookinstance_status_default():
    assert BookInstance("b1", "Gollancz").status == "Maintenance"
    assert BookInstance("b1", "Gollancz", "Bogus").status == "Maintenance"
    copy = BookInstance("b1", "Gollancz", "Loaned", date(2027, 1, 15), id="c1")
    assert copy.due_back_formatted == "Jan 15, 2027"
    assert copy.url == "/catalog/bookinstance/c1"
