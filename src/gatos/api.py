"""HTTP routes for the cats table.

    POST   /api/gatos        create
    GET    /api/gatos        list
    GET    /api/gatos/{id}   fetch
    PUT    /api/gatos/{id}   replace
    DELETE /api/gatos/{id}   delete

Store calls block on file I/O, so they run in worker threads.
"""

from __future__ import annotations

import asyncio
import logging
import re

from aiohttp import web

from gatos.errors import GatosError, ValidationError
from gatos.store import RecordStore

logger = logging.getLogger(__name__)

STORE_KEY = web.AppKey("store", RecordStore)

MSG_FIELDS_REQUIRED = "Todos los campos son obligatorios."
MSG_NOT_FOUND = "Gato no encontrado."

_ID_RE = re.compile(r"-?[0-9]+")


def create_app(store: RecordStore) -> web.Application:
    app = web.Application()
    app[STORE_KEY] = store
    app.router.add_post("/api/gatos", create_gato)
    app.router.add_get("/api/gatos", list_gatos)
    app.router.add_get("/api/gatos/{id}", get_gato)
    app.router.add_put("/api/gatos/{id}", update_gato)
    app.router.add_delete("/api/gatos/{id}", delete_gato)
    return app


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _record_id(request: web.Request) -> int | None:
    """Parse the {id} path segment: an optional minus sign and ASCII digits only."""
    raw = request.match_info["id"]
    if not _ID_RE.fullmatch(raw):
        return None
    return int(raw)


async def _read_fields(request: web.Request) -> dict:
    """JSON object body, or {} so validation reports every field missing."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


async def create_gato(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    fields = await _read_fields(request)
    try:
        gato = await asyncio.to_thread(store.create, fields)
    except ValidationError:
        return _error(MSG_FIELDS_REQUIRED, 400)
    except GatosError:
        logger.exception("Failed to create record")
        return _error("Error al crear el gato.", 500)
    return web.json_response(
        {"message": "Gato creado exitosamente.", "gato": gato.to_dict()}, status=201
    )


async def list_gatos(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    try:
        gatos = await asyncio.to_thread(store.list)
    except GatosError:
        logger.exception("Failed to list records")
        return _error("Error al leer los datos.", 500)
    return web.json_response([g.to_dict() for g in gatos])


async def get_gato(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    record_id = _record_id(request)
    if record_id is None:
        return _error(MSG_NOT_FOUND, 404)
    try:
        gato = await asyncio.to_thread(store.get_by_id, record_id)
    except GatosError:
        logger.exception("Failed to fetch record %d", record_id)
        return _error("Error al obtener el gato.", 500)
    if gato is None:
        return _error(MSG_NOT_FOUND, 404)
    return web.json_response(gato.to_dict())


async def update_gato(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    record_id = _record_id(request)
    if record_id is None:
        return _error(MSG_NOT_FOUND, 404)
    fields = await _read_fields(request)
    try:
        gato = await asyncio.to_thread(store.replace_by_id, record_id, fields)
    except ValidationError:
        return _error(MSG_FIELDS_REQUIRED, 400)
    except GatosError:
        logger.exception("Failed to update record %d", record_id)
        return _error("Error al actualizar el gato.", 500)
    if gato is None:
        return _error(MSG_NOT_FOUND, 404)
    return web.json_response({"message": "Gato actualizado exitosamente.", "gato": gato.to_dict()})


async def delete_gato(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    record_id = _record_id(request)
    if record_id is None:
        return _error(MSG_NOT_FOUND, 404)
    try:
        removed = await asyncio.to_thread(store.delete_by_id, record_id)
    except GatosError:
        logger.exception("Failed to delete record %d", record_id)
        return _error("Error al eliminar el gato.", 500)
    if not removed:
        return _error(MSG_NOT_FOUND, 404)
    return web.json_response({"message": f"Gato con ID {record_id} eliminado exitosamente."})
