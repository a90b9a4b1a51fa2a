"""Tests that the bundled examples keep working.

The examples double as sample handler implementations: a JSON-like
encoder/decoder and a logging-field extractor.
"""

import json
import logging
import sys
from pathlib import Path

import pytest

# Add parent and examples directories to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "examples"))

import simple_json
import simple_logger
from fieldtagger import HandlerError


class TestSimpleJson:
    """my_json tag: In and Out over nested structures."""

    def make_user(self):
        return simple_json.User(
            id=1,
            username="foo",
            profile=simple_json.Profile(email="foo@gmail.com"),
            profile2=simple_json.Profile(email="bar@gmail.com"),
        )

    def test_encode(self):
        document = json.loads(simple_json.encode(self.make_user()))
        assert document == {
            "user_id": 1,
            "username": "foo",
            "profile": {"email": "foo@gmail.com"},
            "profile2": {"email": "bar@gmail.com"},
        }

    def test_decode_fills_pointer_struct(self):
        user = simple_json.decode(
            '{"user_id": 1, "username": "foo", '
            '"profile": {"email": "foo@gmail.com"}, "profile2": {"email": "11"}}'
        )
        assert user.id == 1
        assert user.username == "foo"
        assert user.profile.email == "foo@gmail.com"
        assert user.profile2 is not None
        assert user.profile2.email == "11"

    def test_round_trip(self):
        user = self.make_user()
        assert simple_json.decode(simple_json.encode(user)) == user

    def test_round_trip_without_optional_values(self):
        user = simple_json.User(id=2)
        decoded = simple_json.decode(simple_json.encode(user))
        assert decoded.id == 2
        assert decoded.username is None
        assert decoded.profile == simple_json.Profile()

    def test_missing_required_key(self):
        with pytest.raises(HandlerError, match="Can't find key in json: user_id"):
            simple_json.decode('{"username": "foo"}')


class TestSimpleLogger:
    """my_logger tag: Out-only extraction with the empty-field tag."""

    def make_record(self):
        return simple_logger.MyDataForLogging(
            parsed_body=b"hello world!",
            request_data=simple_logger.RequestData(
                http_status_code=200,
                headers={"Accept": "application/json"},
            ),
            ignore_field="...",
        )

    def test_extract(self):
        message = simple_logger.extract(self.make_record())
        assert message.summary == "hello world!"
        assert message.data == {
            "http_status_code": 200,
            "headers": {"Accept": "application/json"},
        }

    def test_extract_without_request_data(self):
        record = simple_logger.MyDataForLogging(parsed_body=b"x")
        message = simple_logger.extract(record)
        assert message.summary == "x"
        assert message.data == {}

    def test_main_logs_message(self, caplog):
        caplog.set_level(logging.INFO, logger="simple_logger")
        simple_logger.main()
        assert "hello world!" in caplog.text
