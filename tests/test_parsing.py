"""
Tests for inbound parsing and outbound request building.
"""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from src.config import MEME
from src.events import RecordingSink
from src.exceptions import ValidationError
from src.outbound import build_batch_request, build_meme_request, build_text_request
from src.parsing import parse_batch_submission, parse_image_submission, parse_text_submission


def _upload(data: bytes, filename: str = "f.bin", content_type: str | None = None) -> UploadFile:
    headers = Headers({"content-type": content_type}) if content_type else None
    return UploadFile(io.BytesIO(data), filename=filename, headers=headers)


class TestTextPath:

    @pytest.mark.parametrize("payload", [None, {}, {"tweet": 5}, {"text": "hi"}, ["hi"], "hi"])
    def test_missing_or_non_string(self, payload):
        with pytest.raises(ValidationError) as info:
            parse_text_submission(payload)
        assert info.value.details == "missing or non-string text"

    def test_blank_text_rejected(self):
        with pytest.raises(ValidationError):
            parse_text_submission({"tweet": "   "})

    def test_builds_json_body(self):
        sink = RecordingSink()
        req = build_text_request(parse_text_submission({"tweet": "hello"}, sink), sink)
        assert req.path == "/api/analyze"
        assert req.json == {"tweet": "hello"}
        assert req.content_kind == "json"
        assert sink.names() == ["inbound.accepted", "outbound.built"]

    def test_long_text_is_not_capped(self):
        assert len(parse_text_submission({"tweet": "x" * 100_000}).content) == 100_000


class TestBatchPath:

    def test_missing_file(self):
        with pytest.raises(ValidationError) as info:
            parse_batch_submission(None)
        assert info.value.details == "missing file"

    def test_bytes_pass_through_unmodified(self):
        raw = "tweets\ncafé \xff\n".encode("latin-1")
        sub = parse_batch_submission(_upload(raw, "t.csv", "text/csv"))
        req = build_batch_request(sub)
        assert req.content_kind == "multipart"
        assert req.files == {"file": ("t.csv", raw, "text/csv")}


class TestImagePath:

    def test_missing_image(self):
        with pytest.raises(ValidationError) as info:
            parse_image_submission(None)
        assert info.value.details == "missing image"

    def test_empty_image(self):
        with pytest.raises(ValidationError):
            parse_image_submission(_upload(b"", "m.png", "image/png"))

    def test_declared_type_is_trusted(self):
        sub = parse_image_submission(_upload(b"GIF89a", "m.png", "image/jpeg"))
        assert sub.media_type == "image/jpeg"
        assert sub.size == 6

    def test_media_type_defaults_to_png(self):
        assert parse_image_submission(_upload(b"\x89PNG")).media_type == "image/png"

    def test_inference_request(self):
        req = build_meme_request(parse_image_submission(_upload(b"img", "m.png", "image/webp")), 0.2)
        assert req.temperature == 0.2
        assert req.image == b"img"
        assert req.media_type == "image/webp"
        for label in MEME.allowed:
            assert f'"{label}"' in req.prompt
        assert "Do not include any extra text before or after the JSON." in req.prompt
