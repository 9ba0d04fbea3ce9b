"""Sample catalog data for a fresh database."""
import logging
from datetime import date
from typing import Dict

from .author import Author
from .book import Book
from .bookinstance import BookInstance
from .database import DocumentStore
from .genre import Genre

logger = logging.getLogger(__name__)

AUTHORS = [
    Author("Patrick", "Rothfuss", date(1973, 6, 6)),
    Author("Ben", "Bova", date(1932, 11, 8)),
    Author("Isaac", "Asimov", date(1920, 1, 2), date(1992, 4, 6)),
    Author("Bob", "Billings"),
    Author("Jim", "Jones", date(1971, 12, 16)),
]

GENRES = ["Fantasy", "Science Fiction", "French Poetry"]

# (title, summary, isbn, author index, genre indexes)
BOOKS = [
    ("The Name of the Wind (The Kingkiller Chronicle, #1)",
     "I have stolen princesses back from sleeping barrow kings. I burned down the town of Trebon.",
     "9781473211896", 0, [0]),
    ("The Wise Man's Fear (The Kingkiller Chronicle, #2)",
     "Picking up the tale of Kvothe Kingkiller once again, we follow him into exile.",
     "9788401352836", 0, [0]),
    ("The Slow Regard of Silent Things (Kingkiller Chronicle)",
     "Deep below the University, there is a dark place.",
     "9780756411336", 0, [0]),
    ("Apes and Angels",
     "Humankind headed out to the stars not for conquest, nor exploration, nor even for curiosity.",
     "9780765379528", 1, [1]),
    ("Death Wave",
     "In Ben Bova's previous novel New Earth, Jordan Kell led the first human mission beyond the solar system.",
     "9780765379504", 1, [1]),
    ("Test Book 1", "Summary of test book 1", "ISBN111111", 4, [0, 1]),
    ("Test Book 2", "Summary of test book 2", "ISBN222222", 4, []),
]

# (book index, imprint, status, due back)
COPIES = [
    (0, "London Gollancz, 2014.", "Available", None),
    (1, " Gollancz, 2011.", "Loaned", None),
    (2, " Gollancz, 2015.", "Available", None),
    (3, "New York Tom Doherty Associates, 2016.", "Available", None),
    (3, "New York Tom Doherty Associates, 2016.", "Available", None),
    (3, "New York Tom Doherty Associates, 2016.", "Available", None),
    (4, "New York, NY Tom Doherty Associates, LLC, 2015.", "Available", None),
    (4, "New York, NY Tom Doherty Associates, LLC, 2015.", "Maintenance", None),
    (4, "New York, NY Tom Doherty Associates, LLC, 2015.", "Loaned", date(2027, 1, 15)),
    (0, "Imprint XXX2", "Maintenance", None),
    (1, "Imprint XXX3", "Loaned", date(2027, 2, 1)),
]


async def populate_sample_data(store: DocumentStore) -> Dict[str, int]:
    """Insert the sample authors, genres, books and copies; return how many of each."""
    author_ids = []
    for author in AUTHORS:
        stored = await store.insert("authors", author.to_dict())
        author_ids.append(stored["_id"])

    genre_ids = []
    for name in GENRES:
        stored = await store.insert("genres", Genre(name).to_dict())
        genre_ids.append(stored["_id"])

    book_ids = []
    for title, summary, isbn, author_idx, genre_idxs in BOOKS:
        book = Book(title, author_ids[author_idx], summary, isbn, [genre_ids[i] for i in genre_idxs])
        stored = await store.insert("books", book.to_dict())
        book_ids.append(stored["_id"])

    for book_idx, imprint, status, due_back in COPIES:
        copy = BookInstance(book_ids[book_idx], imprint, status, due_back)
        await store.insert("bookinstances", copy.to_dict())

    counts = {
        "authors": len(author_ids),
        "genres": len(genre_ids),
        "books": len(book_ids),
        "bookinstances": len(COPIES),
    }
    logger.info(f"Sample data inserted: {counts}")
    return counts
