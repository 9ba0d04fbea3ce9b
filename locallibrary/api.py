import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from .config import settings
from .controllers import (
    AuthorController,
    BookController,
    BookInstanceController,
    GenreController,
    NotFoundError,
    Outcome,
    Placeholder,
    Redirect,
    Render,
)
from .database import DocumentStore, StoreError
from .views import render

logger = logging.getLogger(__name__)

# Form fields that may repeat (checkbox groups).
MULTI_VALUE_FIELDS = ("genre",)


# --- Helpers ---
def respond(request: Request, outcome: Outcome) -> Response:
    """Turn a controller outcome into an HTTP response."""
    if isinstance(outcome, Redirect):
        return RedirectResponse(outcome.url, status_code=303)
    if isinstance(outcome, Placeholder):
        return PlainTextResponse(outcome.text)
    if isinstance(outcome, Render):
        return render(request, outcome.template, outcome.context)
    raise TypeError(f"Unknown controller outcome: {outcome!r}")


async def read_form(request: Request) -> Dict[str, Any]:
    form = await request.form()
    data: Dict[str, Any] = {}
    for key in form.keys():
        if key in MULTI_VALUE_FIELDS:
            data[key] = form.getlist(key)
        else:
            data[key] = form.get(key)
    return data


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def author_controller(store: DocumentStore = Depends(get_store)) -> AuthorController:
    return AuthorController(store)


def book_controller(store: DocumentStore = Depends(get_store)) -> BookController:
    return BookController(store)


def genre_controller(store: DocumentStore = Depends(get_store)) -> GenreController:
    return GenreController(store)


def bookinstance_controller(store: DocumentStore = Depends(get_store)) -> BookInstanceController:
    return BookInstanceController(store)


router = APIRouter(prefix="/catalog")


# --- Catalog home ---
@router.get("/")
async def index(request: Request, books: BookController = Depends(book_controller)):
    return respond(request, await books.index())


# --- Authors ---
@router.get("/authors")
async def author_list(request: Request, authors: AuthorController = Depends(author_controller)):
    return respond(request, await authors.author_list())


@router.get("/author/create")
async def author_create_get(request: Request, authors: AuthorController = Depends(author_controller)):
    return respond(request, authors.author_create_get())


@router.post("/author/create")
async def author_create_post(request: Request, authors: AuthorController = Depends(author_controller)):
    return respond(request, await authors.author_create_post(await read_form(request)))


@router.get("/author/{author_id}/delete")
async def author_delete_get(author_id: str, request: Request,
                            authors: AuthorController = Depends(author_controller)):
    return respond(request, await authors.author_delete_get(author_id))


@router.post("/author/{author_id}/delete")
async def author_delete_post(author_id: str, request: Request,
                             authors: AuthorController = Depends(author_controller)):
    return respond(request, await authors.author_delete_post(await read_form(request)))


@router.get("/author/{author_id}/update")
async def author_update_get(author_id: str, request: Request,
                            authors: AuthorController = Depends(author_controller)):
    return respond(request, authors.author_update_get(author_id))


@router.post("/author/{author_id}/update")
async def author_update_post(author_id: str, request: Request,
                             authors: AuthorController = Depends(author_controller)):
    return respond(request, authors.author_update_post(author_id))


@router.get("/author/{author_id}")
async def author_detail(author_id: str, request: Request,
                        authors: AuthorController = Depends(author_controller)):
    return respond(request, await authors.author_detail(author_id))


# --- Books ---
@router.get("/books")
async def book_list(request: Request, books: BookController = Depends(book_controller)):
    return respond(request, await books.book_list())


@router.get("/book/create")
async def book_create_get(request: Request, books: BookController = Depends(book_controller)):
    return respond(request, await books.book_create_get())


@router.post("/book/create")
async def book_create_post(request: Request, books: BookController = Depends(book_controller)):
    return respond(request, await books.book_create_post(await read_form(request)))


@router.get("/book/{book_id}/delete")
async def book_delete_get(book_id: str, request: Request, books: BookController = Depends(book_controller)):
    return respond(request, books.book_delete_get(book_id))


@router.post("/book/{book_id}/delete")
async def book_delete_post(book_id: str, request: Request, books: BookController = Depends(book_controller)):
    return respond(request, books.book_delete_post(book_id))


@router.get("/book/{book_id}/update")
async def book_update_get(book_id: str, request: Request, books: BookController = Depends(book_controller)):
    return respond(request, await books.book_update_get(book_id))


@router.post("/book/{book_id}/update")
async def book_update_post(book_id: str, request: Request, books: BookController = Depends(book_controller)):
    return respond(request, await books.book_update_post(book_id, await read_form(request)))


@router.get("/book/{book_id}")
async def book_detail(book_id: str, request: Request, books: BookController = Depends(book_controller)):
    return respond(request, await books.book_detail(book_id))


# --- Genres ---
@router.get("/genres")
async def genre_list(request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, await genres.genre_list())


@router.get("/genre/create")
async def genre_create_get(request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, genres.genre_create_get())


@router.post("/genre/create")
async def genre_create_post(request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, await genres.genre_create_post(await read_form(request)))


@router.get("/genre/{genre_id}/delete")
async def genre_delete_get(genre_id: str, request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, genres.genre_delete_get(genre_id))


@router.post("/genre/{genre_id}/delete")
async def genre_delete_post(genre_id: str, request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, genres.genre_delete_post(genre_id))


@router.get("/genre/{genre_id}/update")
async def genre_update_get(genre_id: str, request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, genres.genre_update_get(genre_id))


@router.post("/genre/{genre_id}/update")
async def genre_update_post(genre_id: str, request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, genres.genre_update_post(genre_id))


@router.get("/genre/{genre_id}")
async def genre_detail(genre_id: str, request: Request, genres: GenreController = Depends(genre_controller)):
    return respond(request, await genres.genre_detail(genre_id))


# --- Book instances ---
@router.get("/bookinstances")
async def bookinstance_list(request: Request,
                            copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, await copies.bookinstance_list())


@router.get("/bookinstance/create")
async def bookinstance_create_get(request: Request,
                                  copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, await copies.bookinstance_create_get())


@router.post("/bookinstance/create")
async def bookinstance_create_post(request: Request,
                                   copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, await copies.bookinstance_create_post(await read_form(request)))


@router.get("/bookinstance/{instance_id}/delete")
async def bookinstance_delete_get(instance_id: str, request: Request,
                                  copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, copies.bookinstance_delete_get(instance_id))


@router.post("/bookinstance/{instance_id}/delete")
async def bookinstance_delete_post(instance_id: str, request: Request,
                                   copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, copies.bookinstance_delete_post(instance_id))


@router.get("/bookinstance/{instance_id}/update")
async def bookinstance_update_get(instance_id: str, request: Request,
                                  copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, copies.bookinstance_update_get(instance_id))


@router.post("/bookinstance/{instance_id}/update")
async def bookinstance_update_post(instance_id: str, request: Request,
                                   copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, copies.bookinstance_update_post(instance_id))


@router.get("/bookinstance/{instance_id}")
async def bookinstance_detail(instance_id: str, request: Request,
                              copies: BookInstanceController = Depends(bookinstance_controller)):
    return respond(request, await copies.bookinstance_detail(instance_id))


def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """Build the web application around an explicit document store."""
    logging.basicConfig(level=settings.log_level)
    if store is None:
        store = DocumentStore(settings.database_file)
    store.initialize()

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.store = store

    # --- Security headers ---
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        return response

    # --- Error pages ---
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return render(request, "error.html", {
            "title": "Not Found",
            "message": str(exc),
            "status": 404,
        }, status_code=404)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Request {request.method} {request.url.path} failed: {exc}", exc_info=exc)
        return render(request, "error.html", {
            "title": "Server Error",
            "message": "The catalog could not be read or updated.",
            "status": 500,
        }, status_code=500)

    @app.get("/")
    async def home():
        return RedirectResponse("/catalog/", status_code=303)

    @app.get("/health")
    async def health():
        """Lightweight health endpoint for container checks."""
        db_ok = True
        try:
            store.ping()
        except Exception:
            db_ok = False
        return {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "db": db_ok,
        }

    app.include_router(router)
    return app
