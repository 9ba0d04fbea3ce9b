"""Document store backed by SQLite.

Every collection is a table of JSON documents keyed by a 24 hex digit
identifier. The public operations are coroutines; the blocking sqlite3 work is
pushed to a worker thread so one request's I/O never stalls the event loop.
"""
import asyncio
import json
import logging
import re
import secrets
import sqlite3
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

COLLECTIONS = ("authors", "books", "genres", "bookinstances")

_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")

Document = Dict[str, Any]
SortSpec = Union[str, Sequence[Tuple[str, int]], None]


class StoreError(Exception):
    """Raised when the underlying database fails a read or a write."""


class InvalidIdError(ValueError):
    """Raised when a value is not a structurally valid document identifier."""


class DocumentId(str):
    """A validated document identifier."""

    @classmethod
    def parse(cls, raw: Any) -> "DocumentId":
        if isinstance(raw, DocumentId):
            return raw
        if not isinstance(raw, str) or not _ID_RE.match(raw):
            raise InvalidIdError(f"Invalid document id: {raw!r}")
        return cls(raw.lower())

    @classmethod
    def generate(cls) -> "DocumentId":
        return cls(secrets.token_hex(12))


def is_valid_id(raw: Any) -> bool:
    return isinstance(raw, str) and bool(_ID_RE.match(raw))


def _values_equal(actual: Any, expected: Any, case_insensitive: bool) -> bool:
    if case_insensitive and isinstance(actual, str) and isinstance(expected, str):
        return actual.casefold() == expected.casefold()
    return actual == expected


def _matches(doc: Document, filter: Optional[Document], case_insensitive: bool = False) -> bool:
    """Field equality; a list-valued field matches when it contains the value."""
    for field, expected in (filter or {}).items():
        actual = doc.get(field)
        if isinstance(actual, list) and not isinstance(expected, list):
            if not any(_values_equal(item, expected, case_insensitive) for item in actual):
                return False
        elif not _values_equal(actual, expected, case_insensitive):
            return False
    return True


def _project(doc: Document, projection: Optional[Iterable[str]]) -> Document:
    if projection is None:
        return doc
    fields = set(projection)
    return {k: v for k, v in doc.items() if k == "_id" or k in fields}


def _sort_key(field: str):
    # Missing values sort first, like nulls in a document database.
    def key(doc: Document):
        value = doc.get(field)
        return (value is not None, value if value is not None else "")
    return key


def _apply_sort(docs: List[Document], sort: SortSpec) -> List[Document]:
    if not sort:
        return docs
    spec = [(sort, 1)] if isinstance(sort, str) else list(sort)
    # Stable sorts applied from the least significant key backwards.
    for field, direction in reversed(spec):
        docs.sort(key=_sort_key(field), reverse=direction < 0)
    return docs


class DocumentStore:
    """Collections of JSON documents stored in a single SQLite file."""

    def __init__(self, db_file: str) -> None:
        self.db_file = db_file

    # ------------------------- Connection helpers ------------------------- #
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_file, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _table(collection: str) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return collection

    def _run(self, fn, *args):
        try:
            return fn(*args)
        except sqlite3.Error as e:
            logger.error(f"Document store failure in {fn.__name__}: {e}")
            raise StoreError(str(e)) from e

    async def _call(self, fn, *args):
        return await asyncio.to_thread(self._run, fn, *args)

    def initialize(self) -> None:
        """Create the collection tables if they do not exist."""
        def create():
            conn = self._connect()
            try:
                for name in COLLECTIONS:
                    conn.execute(
                        f"""
                        CREATE TABLE IF NOT EXISTS {name} (
                            id TEXT PRIMARY KEY,
                            data TEXT NOT NULL,
                            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                        )
                        """
                    )
                conn.commit()
            finally:
                conn.close()
        self._run(create)
        logger.info(f"Document store ready at {self.db_file}")

    def ping(self) -> bool:
        conn = self._connect()
        try:
            conn.execute("SELECT 1")
            return True
        finally:
            conn.close()

    # ------------------------- Blocking operations ------------------------- #
    def _load_all(self, collection: str) -> List[Document]:
        table = self._table(collection)
        conn = self._connect()
        try:
            rows = conn.execute(f"SELECT data FROM {table} ORDER BY rowid").fetchall()
        finally:
            conn.close()
        return [json.loads(row["data"]) for row in rows]

    def _load_many(self, collection: str, ids: List[str]) -> List[Document]:
        if not ids:
            return []
        table = self._table(collection)
        placeholders = ", ".join("?" for _ in ids)
        conn = self._connect()
        try:
            rows = conn.execute(
                f"SELECT data FROM {table} WHERE id IN ({placeholders})", ids
            ).fetchall()
        finally:
            conn.close()
        return [json.loads(row["data"]) for row in rows]

    def _load_one(self, collection: str, doc_id: str) -> Optional[Document]:
        docs = self._load_many(collection, [doc_id])
        return docs[0] if docs else None

    def _insert(self, collection: str, document: Document) -> Document:
        table = self._table(collection)
        stored = dict(document)
        stored["_id"] = str(stored.get("_id") or DocumentId.generate())
        conn = self._connect()
        try:
            conn.execute(
                f"INSERT INTO {table} (id, data) VALUES (?, ?)",
                (stored["_id"], json.dumps(stored)),
            )
            conn.commit()
        finally:
            conn.close()
        return stored

    def _update(self, collection: str, doc_id: str, document: Document) -> Optional[Document]:
        table = self._table(collection)
        stored = dict(document)
        stored["_id"] = doc_id
        conn = self._connect()
        try:
            cursor = conn.execute(
                f"UPDATE {table} SET data = ? WHERE id = ?",
                (json.dumps(stored), doc_id),
            )
            conn.commit()
            updated = cursor.rowcount > 0
        finally:
            conn.close()
        return stored if updated else None

    def _delete(self, collection: str, doc_id: str) -> None:
        table = self._table(collection)
        conn = self._connect()
        try:
            conn.execute(f"DELETE FROM {table} WHERE id = ?", (doc_id,))
            conn.commit()
        finally:
            conn.close()

    # ------------------------- Store contract ------------------------- #
    async def find(
        self,
        collection: str,
        filter: Optional[Document] = None,
        projection: Optional[Iterable[str]] = None,
        sort: SortSpec = None,
    ) -> List[Document]:
        docs = await self._call(self._load_all, collection)
        selected = [doc for doc in docs if _matches(doc, filter)]
        return [_project(doc, projection) for doc in _apply_sort(selected, sort)]

    async def find_one(
        self,
        collection: str,
        filter: Document,
        case_insensitive: bool = False,
    ) -> Optional[Document]:
        docs = await self._call(self._load_all, collection)
        for doc in docs:
            if _matches(doc, filter, case_insensitive):
                return doc
        return None

    async def find_by_id(self, collection: str, doc_id: str) -> Optional[Document]:
        return await self._call(self._load_one, collection, str(doc_id))

    async def count_documents(self, collection: str, filter: Optional[Document] = None) -> int:
        docs = await self._call(self._load_all, collection)
        return sum(1 for doc in docs if _matches(doc, filter))

    async def insert(self, collection: str, document: Document) -> Document:
        stored = await self._call(self._insert, collection, document)
        logger.info(f"Inserted {collection}/{stored['_id']}")
        return stored

    async def update_by_id(self, collection: str, doc_id: str, document: Document) -> Optional[Document]:
        updated = await self._call(self._update, collection, str(doc_id), document)
        if updated is not None:
            logger.info(f"Updated {collection}/{doc_id}")
        return updated

    async def delete_by_id(self, collection: str, doc_id: str) -> None:
        await self._call(self._delete, collection, str(doc_id))
        logger.info(f"Deleted {collection}/{doc_id}")

    async def populate(
        self,
        documents: List[Document],
        field: str,
        collection: str,
    ) -> List[Document]:
        """Replace the reference ids held in ``field`` with the referenced documents.

        Works for single references and for lists of references. Dangling
        references are dropped from lists and become ``None`` for single fields.
        """
        ids: List[str] = []
        for doc in documents:
            value = doc.get(field)
            refs = value if isinstance(value, list) else [value]
            ids.extend(ref for ref in refs if isinstance(ref, str) and ref not in ids)
        referenced = await self._call(self._load_many, collection, ids)
        by_id = {doc["_id"]: doc for doc in referenced}

        populated = []
        for doc in documents:
            out = dict(doc)
            value = doc.get(field)
            if isinstance(value, list):
                out[field] = [by_id[ref] for ref in value if ref in by_id]
            elif value is not None:
                out[field] = by_id.get(value)
            populated.append(out)
        return populated
