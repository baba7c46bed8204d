"""Mini README: FastAPI service exposing the budget ledger.

Structure:
    * create_application - application factory wiring JSON routes to one store.
    * _ledger_payload - shared serialiser for collection responses.

The service replaces the browser callbacks of the original single-page app:
each route forwards raw form values to the ``LedgerStore`` held on
``app.state.store`` and returns fresh figures so a client can re-render.
Ledger errors map to HTTP status codes; user-facing messages are passed
through unchanged in ``detail``.
"""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from ..configuration import get_settings
from ..finance import (
    DataImportError,
    LedgerStore,
    PersistenceError,
    Theme,
    TransactionKind,
    ValidationError,
    export_filename,
)
from ..logging_utils import configure_root_logger, get_logger

LOGGER = get_logger(__name__)

_KIND_PATHS: Dict[str, TransactionKind] = {
    "income": TransactionKind.INCOME,
    "expenses": TransactionKind.EXPENSE,
}


def _ledger_payload(store: LedgerStore) -> Dict[str, object]:
    payload = store.state.as_dict()
    payload["summary"] = store.summary()
    return payload


def _resolve_kind(kind: str) -> TransactionKind:
    try:
        return _KIND_PATHS[kind]
    except KeyError as error:
        raise HTTPException(status_code=404, detail=f"Unknown collection '{kind}'") from error


def create_application(store: Optional[LedgerStore] = None) -> FastAPI:
    """Create the FastAPI application bound to a single ledger store."""

    app = FastAPI(title="Budget Tracker", version="0.1.0")
    if store is None:
        settings = get_settings()
        configure_root_logger(settings.effective_log_level)
        store = LedgerStore.from_settings(settings)
    app.state.store = store
    app.state.applied_theme = app.state.store.settings.theme.value

    def _apply_theme(theme: Theme) -> None:
        app.state.applied_theme = theme.value
        LOGGER.debug("Theme hook applied %s", theme.value)

    app.state.store.add_theme_listener(_apply_theme)

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, error: ValidationError) -> JSONResponse:
        LOGGER.info("Rejected input on %s: %s", request.url.path, error)
        return JSONResponse(status_code=400, content={"detail": str(error)})

    @app.exception_handler(DataImportError)
    async def _import_error(request: Request, error: DataImportError) -> JSONResponse:
        LOGGER.warning("Import rejected: %s", error)
        return JSONResponse(status_code=400, content={"detail": str(error)})

    @app.exception_handler(PersistenceError)
    async def _persistence_error(request: Request, error: PersistenceError) -> JSONResponse:
        LOGGER.error("Storage failure on %s: %s", request.url.path, error)
        return JSONResponse(status_code=500, content={"detail": "Your data could not be saved."})

    @app.get("/api/ledger")
    async def ledger() -> JSONResponse:
        """Return every collection plus settings and summary figures."""

        return JSONResponse(_ledger_payload(app.state.store))

    @app.get("/api/summary")
    async def summary() -> JSONResponse:
        """Return totals, balance and its classification."""

        payload = app.state.store.summary()
        payload["theme"] = app.state.applied_theme
        return JSONResponse(payload)

    @app.delete("/api/{kind}/{transaction_id}")
    async def remove_transaction(kind: str, transaction_id: int) -> JSONResponse:
        """Remove an entry; unknown identifiers are reported but not an error."""

        if kind == "categories":
            removed = app.state.store.remove_category(transaction_id)
        else:
            removed = app.state.store.remove_transaction(transaction_id, _resolve_kind(kind))
        return JSONResponse({"removed": removed, "summary": app.state.store.summary()})

    @app.post("/api/categories", status_code=201)
    async def add_category(name: str = Form(""), budget: str = Form("")) -> JSONResponse:
        """Create a spending category with a budget."""

        category = app.state.store.add_category(name, budget)
        return JSONResponse(status_code=201, content={"category": category.as_dict()})

    @app.put("/api/settings/currency")
    async def update_currency(currency: str = Form(...)) -> JSONResponse:
        settings = app.state.store.update_currency(currency)
        return JSONResponse({"settings": settings.as_dict(), "summary": app.state.store.summary()})

    @app.put("/api/settings/theme")
    async def update_theme(theme: str = Form(...)) -> JSONResponse:
        settings = app.state.store.update_theme(theme)
        return JSONResponse({"settings": settings.as_dict()})

    @app.get("/api/export")
    async def export_data() -> Response:
        """Download the full ledger as a dated JSON file."""

        filename = export_filename()
        LOGGER.info("Exporting ledger as %s", filename)
        return Response(
            content=app.state.store.export_state(),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.post("/api/import")
    async def import_data(file: UploadFile = File(...)) -> JSONResponse:
        """Merge an uploaded export over the current ledger."""

        contents = await file.read()
        LOGGER.info("Received import %s (%s bytes)", file.filename, len(contents))
        app.state.store.import_state(contents)
        return JSONResponse(
            {"message": "Data imported successfully!", "ledger": _ledger_payload(app.state.store)}
        )

    @app.post("/api/clear")
    async def clear_data(confirm: bool = Form(False)) -> JSONResponse:
        """Erase income, expenses and categories once the client confirms."""

        if not confirm:
            raise HTTPException(status_code=400, detail="Clearing data requires confirmation.")
        app.state.store.clear_all_data()
        return JSONResponse(_ledger_payload(app.state.store))

    # Declared last so the fixed /api/... routes above take precedence.
    @app.post("/api/{kind}", status_code=201)
    async def add_transaction(
        kind: str,
        description: str = Form(""),
        amount: str = Form(""),
    ) -> JSONResponse:
        """Record an income or expense entry from raw form values."""

        transaction = app.state.store.add_transaction(description, amount, _resolve_kind(kind))
        return JSONResponse(
            status_code=201,
            content={
                "entry": transaction.as_dict(),
                "summary": app.state.store.summary(),
            },
        )

    return app
