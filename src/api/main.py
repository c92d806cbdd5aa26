"""
FastAPI frontend: HTML pages for the contact directory, flash messages and text export.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
import os
import secrets
import threading
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, RedirectResponse, StreamingResponse
from fastapi.templating import Jinja2Templates
from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from api.flash import DEBUG, SUCCESS, flash, pop_flashes
from contactbook.application import (
    EXPORT_FILENAME,
    ContactNotFound,
    ContactService,
    CreateRejected,
    EditRejected,
    StoreError,
    export_lines,
)
from contactbook.infrastructure import (
    InMemoryContactStore,
    Neo4jContactStore,
    ensure_constraints,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

STORE_MEMORY = "memory"
STORE_NEO4J = "neo4j"

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

_service_lock = threading.Lock()


def _store_backend() -> str:
    return os.environ.get("CONTACTBOOK_STORE", STORE_NEO4J).strip().lower() or STORE_NEO4J


def _get_driver():
    uri = os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip()
    user = os.environ.get("NEO4J_USER", "neo4j").strip()
    password = os.environ.get("NEO4J_PASSWORD", "password").strip()
    return GraphDatabase.driver(uri, auth=(user, password))


def _flash_secret_key() -> str:
    key = os.environ.get("FLASH_SECRET_KEY", "").strip()
    if not key:
        logger.warning("FLASH_SECRET_KEY not set; flash cookies will not survive a restart")
        key = secrets.token_urlsafe(32)
    return key


def _build_service(app: FastAPI) -> ContactService:
    backend = _store_backend()
    if backend == STORE_MEMORY:
        logger.info("Using in-memory contact store")
        return ContactService(InMemoryContactStore())
    if backend != STORE_NEO4J:
        raise RuntimeError(f"Unknown CONTACTBOOK_STORE: {backend!r}")
    if getattr(app.state, "driver", None) is None:
        driver = _get_driver()
        try:
            ensure_constraints(driver)
        except (Neo4jError, DriverError) as e:
            driver.close()
            raise StoreError(f"Could not prepare Neo4j store: {e}") from e
        app.state.driver = driver
    logger.info("Using Neo4j contact store")
    return ContactService(Neo4jContactStore(app.state.driver))


def get_service(request: Request) -> ContactService:
    app = request.app
    if getattr(app.state, "service", None) is None:
        # sync dependencies run in a threadpool; one service per app
        with _service_lock:
            if getattr(app.state, "service", None) is None:
                app.state.service = _build_service(app)
    return app.state.service


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.driver = None
    app.state.service = None
    try:
        yield
    finally:
        if getattr(app.state, "driver", None) is not None:
            app.state.driver.close()


app = FastAPI(title="Contacts", lifespan=lifespan)
app.add_middleware(SessionMiddleware, secret_key=_flash_secret_key(), session_cookie="flash")


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return PlainTextResponse("nothing to see here", status_code=404)
    return await http_exception_handler(request, exc)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.exception("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse("contact store unavailable", status_code=500)


def _render(request: Request, name: str, context: dict, status_code: int = 200):
    context = {"messages": pop_flashes(request), **context}
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def _new_form(request: Request, name: str = "", email: str = "", error: str | None = None):
    status_code = 422 if error else 200
    return _render(request, "new.html", {"name": name, "email": email, "error": error}, status_code)


def _edit_form(
    request: Request, contact_id: int, name: str, email: str, error: str | None = None
):
    status_code = 422 if error else 200
    return _render(
        request,
        "edit.html",
        {"contact_id": contact_id, "name": name, "email": email, "error": error},
        status_code,
    )


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- HTML: contacts ---


@app.get("/")
def index():
    return RedirectResponse("/contacts", status_code=308)


@app.get("/contacts")
def list_contacts(
    request: Request,
    name: str | None = None,
    service: ContactService = Depends(get_service),
):
    contacts = service.list_contacts(name)
    return _render(request, "contacts.html", {"contacts": contacts, "query": name})


@app.get("/contacts/download")
def download_contacts(service: ContactService = Depends(get_service)):
    headers = {"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'}
    return StreamingResponse(
        export_lines(service.store),
        media_type="text/plain; charset=utf-8",
        headers=headers,
    )


@app.get("/contacts/new")
def new_contact_form(request: Request):
    return _new_form(request)


@app.post("/contacts/new")
def create_contact(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    service: ContactService = Depends(get_service),
):
    result = service.create_contact(name, email)
    if isinstance(result, CreateRejected):
        return _new_form(
            request, result.submitted_name, result.submitted_email, result.message
        )
    flash(request, "New Contact Saved", DEBUG)
    return RedirectResponse("/contacts", status_code=303)


@app.get("/contacts/{contact_id:int}")
def view_contact(
    request: Request,
    contact_id: int,
    service: ContactService = Depends(get_service),
):
    contact = service.get_contact(contact_id)
    if isinstance(contact, ContactNotFound):
        raise HTTPException(status_code=404)
    return _render(request, "view.html", {"contact": contact})


@app.get("/contacts/{contact_id:int}/edit")
def edit_contact_form(
    request: Request,
    contact_id: int,
    service: ContactService = Depends(get_service),
):
    contact = service.get_contact(contact_id)
    if isinstance(contact, ContactNotFound):
        raise HTTPException(status_code=404)
    return _edit_form(request, contact.id, contact.name, contact.email)


@app.post("/contacts/{contact_id:int}/edit")
def update_contact(
    request: Request,
    contact_id: int,
    name: str = Form(""),
    email: str = Form(""),
    service: ContactService = Depends(get_service),
):
    result = service.update_contact(contact_id, name, email)
    if isinstance(result, EditRejected):
        return _edit_form(
            request,
            result.contact_id,
            result.submitted_name,
            result.submitted_email,
            result.message,
        )
    if isinstance(result, ContactNotFound):
        raise HTTPException(status_code=404)
    flash(request, "Changes Saved", SUCCESS)
    return RedirectResponse(f"/contacts/{result.id}", status_code=303)


@app.delete("/contacts/{contact_id:int}")
def delete_contact(contact_id: int, service: ContactService = Depends(get_service)):
    service.delete_contact(contact_id)
    return RedirectResponse("/contacts", status_code=303)


@app.get("/set_flash")
def set_flash(request: Request):
    flash(request, "Hi from flash!", DEBUG)
    return RedirectResponse("/", status_code=303)
