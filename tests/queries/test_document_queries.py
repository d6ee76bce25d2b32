"""Generic document CRUD and file operations."""

from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest

from foundry_bridge.domain.users import User
from foundry_bridge.host.memory import InMemoryWorld
from foundry_bridge.queries.handlers.files import file_extension, sanitize_filename
from foundry_bridge.queries.registry import QueryRegistry
from tests.conftest import call_err, call_ok, png_bytes

pytestmark = pytest.mark.anyio


class TestCreateDocument:
    async def test_create_actor(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "createDocument",
            gm,
            documentType="Actor",
            data={"name": "Goblin Boss", "type": "npc"},
            folderName="Villains",
        )
        assert response["name"] == "Goblin Boss"
        folder = world.folders[response["folder"]]
        assert (folder["name"], folder["type"]) == ("Villains", "Actor")

    async def test_rejects_scene_type(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry,
            "createDocument",
            gm,
            documentType="Scene",
            data={"name": "x", "type": "base"},
        )
        assert 'documentType must be "Actor" or "Item"' in error

    async def test_batch_create(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry,
            "batchCreateDocuments",
            gm,
            documentType="Item",
            documents=[{"name": "Torch", "type": "loot"}, {"name": "Lantern", "type": "loot"}],
        )
        assert response["count"] == 2
        assert len(world.documents["Item"]) == 3

    async def test_batch_into_missing_folder(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry,
            "batchCreateDocuments",
            gm,
            documentType="Item",
            documents=[{"name": "Torch"}],
            folderId="missingFolder001",
        )
        assert error.endswith("Folder not found: missingFolder001")


class TestUpdateDocument:
    async def test_requires_a_change(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry, "updateDocument", gm, documentType="Actor", documentId="aCtorLyra0000001"
        )
        assert "At least one of updates, addItems, or removeItemIds" in error

    async def test_add_and_remove_items(
        self, registry: QueryRegistry, world: InMemoryWorld, gm: User
    ) -> None:
        response = await call_ok(
            registry,
            "updateDocument",
            gm,
            documentType="Actor",
            documentId="aCtorLyra0000001",
            updates={"system.attributes.hp.value": 10},
            addItems=[{"name": "Dagger", "type": "weapon"}],
            removeItemIds=["iTemFireball0002"],
        )
        assert (response["itemsAdded"], response["itemsRemoved"]) == (1, 1)
        lyra = world.documents["Actor"]["aCtorLyra0000001"]
        assert lyra["system"]["attributes"]["hp"] == {"value": 10, "max": 27}
        assert "Fireball" not in [i["name"] for i in lyra["items"]]

    async def test_items_only_on_actors(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry,
            "updateDocument",
            gm,
            documentType="Item",
            documentId="wItemRopeHemp001",
            addItems=[{"name": "Knot"}],
        )
        assert error.endswith("Embedded items can only be changed on actors")

    async def test_delete(self, registry: QueryRegistry, world: InMemoryWorld, gm: User) -> None:
        response = await call_ok(
            registry, "deleteDocument", gm, documentType="Item", documentId="wItemRopeHemp001"
        )
        assert response["deleted"] is True
        assert world.documents["Item"] == {}

    async def test_delete_missing(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry, "deleteDocument", gm, documentType="Item", documentId="gone"
        )
        assert error == "Failed to delete document: Item not found: gone"


class TestFileHelpers:
    def test_sanitize_keeps_spaces(self) -> None:
        assert sanitize_filename("cave #1 (night).png") == "cave _1 _night_.png"

    def test_extension(self) -> None:
        assert file_extension("Map.PNG") == "png"
        assert file_extension("README") == "readme"


class TestFiles:
    async def test_upload_creates_directories(
        self, registry: QueryRegistry, world: InMemoryWorld, gm: User
    ) -> None:
        encoded = base64.b64encode(png_bytes(10, 20)).decode()
        response = await call_ok(
            registry,
            "uploadFile",
            gm,
            filename="cave map.png",
            base64data=encoded,
            targetPath="/worlds/test-world/assets/maps/",
        )
        assert response["path"] == "worlds/test-world/assets/maps/cave map.png"
        assert "worlds/test-world/assets" in world.directories["data"]
        assert world.files["data"][response["path"]] == png_bytes(10, 20)

    async def test_unsupported_extension(self, registry: QueryRegistry, gm: User) -> None:
        error = await call_err(
            registry, "uploadFile", gm, filename="run.exe", base64data="AAAA", targetPath="x"
        )
        assert "Unsupported file extension: .exe" in error

    @pytest.mark.parametrize("payload", ["@@@@", "AAA!", "AAAA====x"])
    async def test_corrupt_base64_rejected_before_upload(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User, payload: str
    ) -> None:
        error = await call_err(
            fake_registry, "uploadFile", gm, filename="b.png", base64data=payload, targetPath="a"
        )
        assert "base64data is not valid base64" in error
        facade.upload_file.assert_not_awaited()
        facade.create_directory.assert_not_awaited()

    async def test_wrapped_base64_is_accepted(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.upload_file.return_value = {"path": "a/b.png"}
        await call_ok(
            fake_registry, "uploadFile", gm, filename="b.png", base64data="AA\nAA", targetPath="a"
        )
        assert facade.upload_file.await_args.args[3] == b"\x00\x00\x00"

    async def test_browse(self, registry: QueryRegistry, gm: User) -> None:
        encoded = base64.b64encode(b"sound").decode()
        await call_ok(
            registry, "uploadFile", gm, filename="a.ogg", base64data=encoded, targetPath="worlds"
        )
        response = await call_ok(
            registry, "browseFiles", gm, source="data", target="worlds", extensions=[".ogg"]
        )
        assert response["dirs"] == ["worlds/test-world"]
        assert response["files"] == ["worlds/a.ogg"]

    async def test_browse_defaults(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.browse_files.return_value = {"target": ""}
        response = await call_ok(fake_registry, "browseFiles", gm)
        facade.browse_files.assert_awaited_once_with("public", "", None)
        assert response == {"success": True, "target": "", "dirs": [], "files": []}

    async def test_directory_errors_are_not_fatal(
        self, fake_registry: QueryRegistry, facade: MagicMock, gm: User
    ) -> None:
        facade.create_directory.side_effect = OSError("EACCES")
        facade.upload_file.return_value = {"path": "a/b.png"}
        response = await call_ok(
            fake_registry, "uploadFile", gm, filename="b.png", base64data="AAAA", targetPath="a"
        )
        assert response["path"] == "a/b.png"
