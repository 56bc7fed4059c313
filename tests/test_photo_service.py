"""Unit tests for the photo store and the multipart JSON helpers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import io
import pytest
from vms.exceptions import ValidationError
from vms.services.photo_service import PhotoStore, PhotoUpload
from vms.utils.json_parser import parse_visitor_json, safe_parse_json


class TestPhotoStore:
    def test_no_photo_returns_none(self, photo_store):
        assert photo_store.save(None) is None
        assert photo_store.save(PhotoUpload(content=b"")) is None

    def test_unsafe_extension_replaced(self, photo_store):
        name = photo_store.save(PhotoUpload(content=b"abc", filename="../../etc/passwd.sh;rm"))
        assert name.endswith(".bin")
        assert os.path.dirname(photo_store.path_for(name)) == photo_store.root

    def test_size_limit(self, tmp_path):
        store = PhotoStore(root=str(tmp_path), max_bytes=3)
        with pytest.raises(ValidationError):
            store.save(PhotoUpload(content=b"abcd", filename="a.png"))

    def test_read_upload_within_limit(self, photo_store):
        upload = photo_store.read_upload(io.BytesIO(b"jpeg-bytes"), filename="a.jpg")
        assert upload.content == b"jpeg-bytes"
        assert upload.filename == "a.jpg"

    def test_read_upload_stops_past_limit(self, photo_store):
        stream = io.BytesIO(b"x" * (photo_store.max_bytes * 10))
        with pytest.raises(ValidationError):
            photo_store.read_upload(stream)
        # Only one byte past the limit was pulled from the stream
        assert stream.tell() == photo_store.max_bytes + 1

    def test_read_upload_exactly_at_limit(self, photo_store):
        upload = photo_store.read_upload(io.BytesIO(b"x" * photo_store.max_bytes))
        assert len(upload.content) == photo_store.max_bytes

    def test_discard_missing_file_is_quiet(self, photo_store):
        photo_store.discard("visitor_never_written.png")
        photo_store.discard(None)


class TestVisitorJson:
    def test_first_present_field_wins(self):
        assert parse_visitor_json(None, '{"name": "Bob"}') == {"name": "Bob"}

    def test_none_present(self):
        with pytest.raises(ValidationError):
            parse_visitor_json(None, None)

    def test_array_is_not_an_object(self):
        assert safe_parse_json('["Bob"]') is None
        with pytest.raises(ValidationError):
            parse_visitor_json('["Bob"]')
