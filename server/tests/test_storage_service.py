"""
Tests for export storage.
"""

import pytest

from slidegen.services.storage_service import ExportStorage


class TestExportStorage:
    @pytest.mark.asyncio
    async def test_save_writes_under_export_key(self, tmp_path):
        storage = ExportStorage(str(tmp_path))
        key = await storage.save("deck.pptx", b"PK\x03\x04")

        prefix, export_id, filename = key.split("/")
        assert prefix == "exports"
        assert filename == "deck.pptx"
        assert (tmp_path / key).read_bytes() == b"PK\x03\x04"
        assert storage.url_for(key) == f"/api/files/exports/{export_id}/deck.pptx"

    @pytest.mark.asyncio
    async def test_each_export_gets_its_own_directory(self, tmp_path):
        storage = ExportStorage(str(tmp_path))
        first = await storage.save("deck.pptx", b"one")
        second = await storage.save("deck.pptx", b"two")
        assert first != second
        assert (tmp_path / first).read_bytes() == b"one"

    def test_filename_cannot_escape(self, tmp_path):
        key = ExportStorage(str(tmp_path)).new_key("../../etc/passwd")
        assert key.startswith("exports/")
        assert key.endswith("/passwd")
        assert ".." not in key
