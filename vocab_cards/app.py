from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from vocab_cards.api.schemas import HealthResponse, SaveResponse, WordPairPayload
from vocab_cards.config import DATA_DIR, TEMPLATES_DIR, ensure_dirs, server_port
from vocab_cards.errors import FileAccessError
from vocab_cards.session import transitions, view
from vocab_cards.session.models import DisplayFilter, LoadedScope, PrimaryLanguage, ScopeKind, SessionState
from vocab_cards.storage.files import FileStore

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "InvalidName": 400,
    "NotFound": 404,
    "Corrupt": 500,
    "StorageUnavailable": 503,
}

store = FileStore(DATA_DIR)
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@asynccontextmanager
async def lifespan(_app: FastAPI):
    ensure_dirs()
    logger.info("Serving lessons from %s on port %s", store.data_dir, server_port())
    yield


app = FastAPI(title="Vocab Cards", version="0.3.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/data", StaticFiles(directory=str(DATA_DIR), check_dir=False), name="data")


def _http_error(exc: FileAccessError) -> HTTPException:
    return HTTPException(status_code=ERROR_STATUS.get(exc.code, 500), detail=exc.to_detail())


@app.get("/api/health", response_model=HealthResponse)
def health() -> dict:
    return {"status": "Server is running", "port": server_port()}


@app.get("/api/files")
def list_files() -> list[str]:
    try:
        return store.list_files()
    except FileAccessError as exc:
        logger.error("Error listing files: %s", exc)
        raise _http_error(exc) from exc


@app.get("/api/data/{name}")
def read_file(name: str) -> list[dict]:
    try:
        return store.read_file(name)
    except FileAccessError as exc:
        logger.error("Error reading file %s: %s", name, exc)
        raise _http_error(exc) from exc


@app.post("/api/save/{name}", response_model=SaveResponse)
def save_file(name: str, items: list[WordPairPayload]) -> dict:
    try:
        store.write_file(name, [item.model_dump() for item in items])
    except FileAccessError as exc:
        logger.error("Error saving file %s: %s", name, exc)
        raise _http_error(exc) from exc
    return {"success": True, "message": f"{name}.json updated successfully"}


@app.get("/", response_class=HTMLResponse)
def home(request: Request) -> HTMLResponse:
    try:
        names = store.list_files()
    except FileAccessError as exc:
        logger.error("Error listing files: %s", exc)
        names = []
    return templates.TemplateResponse(request, "index.html", {"files": names})


@app.get("/study", response_class=HTMLResponse)
def study(
    request: Request,
    files: list[str] = Query(default=[]),
    display: str = Query(default="active"),
    q: str = Query(default=""),
    card: int = Query(default=0),
    reveal: int = Query(default=0),
    lang: str = Query(default="english"),
) -> HTMLResponse:
    try:
        display_filter = DisplayFilter(display)
        language = PrimaryLanguage(lang)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    state = build_study_state(
        files,
        display_filter=display_filter,
        language=language,
        query=q,
        card=card,
        reveal=bool(reveal),
    )
    context = {
        "state": state,
        "title": view.display_title(state),
        "record": view.current_record(state),
        "front": view.primary_text(state),
        "back": view.secondary_text(state),
        "front_hint": view.primary_hint(state),
        "back_hint": view.secondary_hint(state),
        "rows": view.table_rows(state),
        "total": len(state.visible_records),
    }
    return templates.TemplateResponse(request, "study.html", context)


def build_study_state(
    names: list[str],
    *,
    display_filter: DisplayFilter = DisplayFilter.ACTIVE,
    language: PrimaryLanguage = PrimaryLanguage.SOURCE,
    query: str = "",
    card: int = 0,
    reveal: bool = False,
) -> SessionState:
    """Run the session transitions server-side for a read-only study page."""
    if not names:
        try:
            names = store.list_files()
        except FileAccessError as exc:
            raise _http_error(exc) from exc
        scope = LoadedScope.all_files(names)
    elif len(names) == 1:
        scope = LoadedScope.single(names[0])
    else:
        scope = LoadedScope.multi(names)

    loaded = []
    for name in names:
        try:
            loaded.append((name, store.read_file(name)))
        except FileAccessError as exc:
            if scope.kind is ScopeKind.SINGLE:
                raise _http_error(exc) from exc
            logger.warning("Skipping %s on study page: %s", name, exc)

    state = transitions.set_display_filter(SessionState(), display_filter)
    state, request_id = transitions.begin_load(state)
    state = transitions.complete_load(state, request_id, scope, loaded).state
    state = transitions.set_primary_language(state, language)
    state = transitions.set_search_query(state, query)
    state = transitions.jump_to_card(state, card)
    if reveal:
        state = transitions.reveal_card(state)
    return state


@app.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    svg = (
        "<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 64 64'>"
        "<rect width='64' height='64' rx='14' fill='#0e7490'/>"
        "<text x='32' y='42' text-anchor='middle' font-size='34' fill='white' font-family='Arial'>Q</text>"
        "</svg>"
    )
    return Response(content=svg, media_type="image/svg+xml")
