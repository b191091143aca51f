"""
FormDrop Backend: Upload Service Unit Tests
=============================================

What:  Stored-name generation, URL building, directory creation, count
       limit and storage failures of UploadService.
How:   Real files in a temporary directory; aiofiles patched for failures.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from app.exceptions import UploadError, ValidationError
from app.services.upload_service import IncomingFile, UploadService


class TestNaming:

    def setup_method(self):
        self.service = UploadService(storage_root="/tmp/formdrop-naming", field_name="images")

    def test_name_has_field_time_and_original(self):
        name = self.service.generate_name("cat.png", now_ms=1700000000000)
        assert name == "images-1700000000000-cat.png"

    def test_spaces_become_underscores(self):
        name = self.service.generate_name("my cat  photo.png", now_ms=1)
        assert name == "images-1-my_cat__photo.png"

    def test_directory_parts_are_dropped(self):
        assert self.service.generate_name("../../etc/passwd", now_ms=1) == "images-1-passwd"
        assert self.service.generate_name("C:\\Users\\ann\\cat.png", now_ms=1) == "images-1-cat.png"

    def test_uses_current_time_by_default(self):
        with patch("app.services.upload_service.time.time", return_value=1700000000.5):
            name = self.service.generate_name("cat.png")
        assert name == "images-1700000000500-cat.png"

    def test_public_url(self):
        url = self.service.public_url("https://forms.example.org/", "images-1-cat.png")
        assert url == "https://forms.example.org/uploads/images-1-cat.png"

    def test_public_url_escapes_reserved_characters(self):
        url = self.service.public_url("http://h", "images-1-photo#1?v=%20.png")
        assert url == "http://h/uploads/images-1-photo%231%3Fv%3D%2520.png"

    def test_custom_prefix(self):
        service = UploadService(storage_root="/tmp/x", url_prefix="files/")
        assert service.public_url("http://h", "a.png") == "http://h/files/a.png"

    def test_resolve_rejects_escape(self):
        with pytest.raises(ValidationError, match="Invalid file path"):
            self.service.resolve("../secret.txt")

    def test_resolve_plain_name(self):
        path = self.service.resolve("images-1-cat.png")
        assert path == Path("/tmp/formdrop-naming").resolve() / "images-1-cat.png"


class TestStoreUploads:

    @pytest.mark.asyncio
    async def test_creates_directory_on_first_use(self, upload_store, sample_image_bytes):
        assert not upload_store.storage_root.exists()

        urls = await upload_store.store_uploads(
            [IncomingFile("cat.png", sample_image_bytes)], "http://test"
        )

        assert upload_store.storage_root.is_dir()
        assert len(urls) == 1
        stored = urls[0].rsplit("/", 1)[1]
        assert (upload_store.storage_root / stored).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_urls_follow_receipt_order(self, upload_store):
        files = [IncomingFile("b.png", b"b"), IncomingFile("a.png", b"a")]

        urls = await upload_store.store_uploads(files, "http://test")

        assert urls[0].startswith("http://test/uploads/images-")
        assert urls[0].endswith("-b.png")
        assert urls[1].endswith("-a.png")

    @pytest.mark.asyncio
    async def test_different_names_never_share_a_reference(self, upload_store):
        files = [IncomingFile("one.png", b"1"), IncomingFile("two.png", b"2")]

        with patch("app.services.upload_service.time.time", return_value=1700000000.0):
            urls = await upload_store.store_uploads(files, "http://test")

        assert len(set(urls)) == 2

    @pytest.mark.asyncio
    async def test_no_files_is_not_an_error(self, upload_store):
        assert await upload_store.store_uploads([], "http://test") == []

    @pytest.mark.asyncio
    async def test_more_than_max_rejected_before_writing(self, upload_store):
        files = [IncomingFile(f"{i}.png", b"x") for i in range(6)]

        with pytest.raises(ValidationError, match="maximum of 5"):
            await upload_store.store_uploads(files, "http://test")

        assert not upload_store.storage_root.exists()

    @pytest.mark.asyncio
    async def test_write_failure_raises_upload_error(self, upload_store):
        with patch("app.services.upload_service.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(UploadError) as exc_info:
                await upload_store.store_uploads([IncomingFile("cat.png", b"x")], "http://test")

        assert exc_info.value.context["os_error"] == "disk full"

    @pytest.mark.asyncio
    async def test_earlier_files_stay_after_failure(self, upload_store):
        original = upload_store.store_file
        calls = []

        async def fail_second(file):
            calls.append(file.filename)
            if len(calls) == 2:
                raise UploadError()
            return await original(file)

        with patch.object(upload_store, "store_file", side_effect=fail_second):
            with pytest.raises(UploadError):
                await upload_store.store_uploads(
                    [IncomingFile("a.png", b"a"), IncomingFile("b.png", b"b")], "http://test"
                )

        assert len(list(upload_store.storage_root.iterdir())) == 1
