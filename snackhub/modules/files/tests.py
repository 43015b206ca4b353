"""
Tests for image key generation and upload validation
"""
import io
import warnings
from datetime import datetime, timezone

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from snackhub.modules.files.service import ImageStorage, validate_image


def _upload(content: bytes, content_type: str, filename="chips.png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestGenerateKey:

    def test_key_is_dated_in_utc(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            key = ImageStorage.generate_key("products", "chips.png")

        now = datetime.now(timezone.utc)
        assert key.startswith(f"uploads/products/{now.year}/{now.month:02d}/")
        assert key.endswith("-chips.png")

    def test_unsafe_characters_are_replaced(self):
        key = ImageStorage.generate_key("users", "my photo (1).png")
        assert key.endswith("-my_photo__1_.png")
        assert " " not in key


class TestValidateImage:

    def test_accepts_png(self):
        assert validate_image(_upload(b"\x89PNG data", "image/png")) == b"\x89PNG data"

    def test_rejects_other_types(self):
        with pytest.raises(HTTPException) as exc:
            validate_image(_upload(b"%PDF", "application/pdf", "menu.pdf"))
        assert exc.value.status_code == 422
