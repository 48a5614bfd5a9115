"""Tests for the HTTP routes."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

import pytest
from aiohttp import test_utils

from gatos.api import create_app
from gatos.errors import StorageWriteError
from gatos.store import RecordStore

TOM = {
    "name": "Tom",
    "image": "tom.png",
    "description": "orange cat",
    "gender": "male",
    "observations": "none",
}
LUNA = {
    "name": "Luna",
    "image": "luna.png",
    "description": "black cat",
    "gender": "female",
    "observations": "shy",
}


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    s = RecordStore(tmp_path / "gatos.csv")
    s.initialize()
    return s


@asynccontextmanager
async def _client(store: RecordStore):
    async with test_utils.TestClient(test_utils.TestServer(create_app(store))) as client:
        yield client


class TestCreate:
    @pytest.mark.asyncio
    async def test_created(self, store: RecordStore):
        async with _client(store) as client:
            resp = await client.post("/api/gatos", json=TOM)
            assert resp.status == 201
            body = await resp.json()
        assert body == {"message": "Gato creado exitosamente.", "gato": {"id": 1, **TOM}}
        assert store.get_by_id(1).name == "Tom"

    @pytest.mark.asyncio
    async def test_missing_field(self, store: RecordStore):
        async with _client(store) as client:
            resp = await client.post("/api/gatos", json={**TOM, "observations": ""})
            assert resp.status == 400
            assert await resp.json() == {"error": "Todos los campos son obligatorios."}
        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_invalid_json(self, store: RecordStore):
        async with _client(store) as client:
            resp = await client.post(
                "/api/gatos", data="not json", headers={"Content-Type": "application/json"}
            )
            assert resp.status == 400

    @pytest.mark.asyncio
    async def test_non_object_body(self, store: RecordStore):
        async with _client(store) as client:
            resp = await client.post("/api/gatos", json=[TOM])
            assert resp.status == 400

    @pytest.mark.asyncio
    async def test_storage_failure(self, store: RecordStore, monkeypatch):
        def fail(fields):
            raise StorageWriteError("disk full")

        monkeypatch.setattr(store, "create", fail)
        async with _client(store) as client:
            resp = await client.post("/api/gatos", json=TOM)
            assert resp.status == 500
            assert await resp.json() == {"error": "Error al crear el gato."}


class TestRead:
    @pytest.mark.asyncio
    async def test_list_empty(self, store: RecordStore):
        async with _client(store) as client:
            resp = await client.get("/api/gatos")
            assert resp.status == 200
            assert await resp.json() == []

    @pytest.mark.asyncio
    async def test_list_in_order(self, store: RecordStore):
        store.create(TOM)
        store.create(LUNA)
        async with _client(store) as client:
            resp = await client.get("/api/gatos")
            body = await resp.json()
        assert body == [{"id": 1, **TOM}, {"id": 2, **LUNA}]

    @pytest.mark.asyncio
    async def test_list_malformed_table(self, store: RecordStore):
        store.path.write_text("garbage\n", encoding="utf-8")
        async with _client(store) as client:
            resp = await client.get("/api/gatos")
            assert resp.status == 500
            assert await resp.json() == {"error": "Error al leer los datos."}

    @pytest.mark.asyncio
    async def test_get(self, store: RecordStore):
        store.create(TOM)
        async with _client(store) as client:
            resp = await client.get("/api/gatos/1")
            assert resp.status == 200
            assert await resp.json() == {"id": 1, **TOM}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/gatos/2", "/api/gatos/abc", "/api/gatos/1.5"])
    async def test_get_not_found(self, store: RecordStore, path: str):
        store.create(TOM)
        async with _client(store) as client:
            resp = await client.get(path)
            assert resp.status == 404
            assert await resp.json() == {"error": "Gato no encontrado."}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("segment", ["1_0", "+10", "%2010", "10%20", "1e1"])
    async def test_only_plain_digits_match(self, store: RecordStore, segment: str):
        for _ in range(10):
            store.create(TOM)
        async with _client(store) as client:
            assert (await client.get("/api/gatos/10")).status == 200
            resp = await client.get(f"/api/gatos/{segment}")
            assert resp.status == 404
            resp = await client.delete(f"/api/gatos/{segment}")
            assert resp.status == 404
        assert store.get_by_id(10) is not None


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update(self, store: RecordStore):
        store.create(TOM)
        async with _client(store) as client:
            resp = await client.put("/api/gatos/1", json=LUNA)
            assert resp.status == 200
            body = await resp.json()
        assert body == {"message": "Gato actualizado exitosamente.", "gato": {"id": 1, **LUNA}}
        assert store.get_by_id(1).name == "Luna"
        assert len(store.list()) == 1

    @pytest.mark.asyncio
    async def test_update_not_found(self, store: RecordStore):
        async with _client(store) as client:
            resp = await client.put("/api/gatos/3", json=LUNA)
            assert resp.status == 404

    @pytest.mark.asyncio
    async def test_update_partial_body(self, store: RecordStore):
        store.create(TOM)
        async with _client(store) as client:
            resp = await client.put("/api/gatos/1", json={"name": "Tommy"})
            assert resp.status == 400
        assert store.get_by_id(1).name == "Tom"


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, store: RecordStore):
        store.create(TOM)
        async with _client(store) as client:
            resp = await client.delete("/api/gatos/1")
            assert resp.status == 200
            assert await resp.json() == {"message": "Gato con ID 1 eliminado exitosamente."}
            resp = await client.delete("/api/gatos/1")
            assert resp.status == 404
        assert store.list() == []

    @pytest.mark.asyncio
    async def test_delete_bad_id(self, store: RecordStore):
        async with _client(store) as client:
            resp = await client.delete("/api/gatos/xyz")
            assert resp.status == 404


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_restart_reseeds_from_max_id(self, store: RecordStore):
        async with _client(store) as client:
            await client.post("/api/gatos", json=TOM)
            await client.post("/api/gatos", json=LUNA)
            await client.delete("/api/gatos/2")

        restarted = RecordStore(store.path)
        restarted.initialize()
        async with _client(restarted) as client:
            resp = await client.post("/api/gatos", json=LUNA)
            body = await resp.json()
        # Highest surviving id is 1, so the restarted process hands out 2 again.
        assert body["gato"]["id"] == 2
