#!/usr/bin/env python3
"""
Logging-field extractor built on FieldTagger.

This example demonstrates:
- An Out-only tag with a custom grammar ("key:summary | to:string")
- A marker annotation ("-") to skip a field
- The empty-field tag handling untagged fields of a nested structure
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from fieldtagger import Field, OutHandler, new_tag, new_tagger, tagged

logger = logging.getLogger("simple_logger")

TAG_NAME = "my_logger"


@dataclass
class RequestData:
    http_status_code: int = 0
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class MyDataForLogging:
    parsed_body: bytes = tagged(my_logger="key:summary | to:string", default=b"")
    request_data: Optional[RequestData] = tagged(my_logger="key:data", default=None)
    ignore_field: str = tagged(my_logger="-", default="")


@dataclass
class LoggerMessage:
    summary: str = ""
    data: Dict[str, Any] = field(default_factory=dict)


class MyLoggerOut(OutHandler):
    """Collects a LoggerMessage from a tagged structure."""

    def handle(self, data: LoggerMessage, field: Field, owner: Any) -> LoggerMessage:
        if field.is_struct or field.tag.exists("-"):
            return data

        value = field.get()

        if field.tag.is_empty() and field.parent_struct is not None:
            parent_tag = field.parent_struct.parent_field.tag
            key, exists = parent_tag.find_by_key("key")
            if exists and key == "data":
                data.data[field.name] = value
            return data

        key, exists = field.tag.find_by_key("key")
        if exists and key == "summary":
            convert_to, exists = field.tag.find_by_key("to")
            if exists and convert_to == "string" and isinstance(value, bytes):
                data.summary = value.decode()
            else:
                data.summary = str(value)

        return data


def create_tagger():
    return new_tagger().add(
        new_tag(TAG_NAME).with_out_handler(MyLoggerOut()).with_symbols(":", " | ")
    )


def extract(record: MyDataForLogging) -> LoggerMessage:
    return create_tagger().out(LoggerMessage(), record, TAG_NAME)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    record = MyDataForLogging(
        parsed_body=b"hello world!",
        request_data=RequestData(
            http_status_code=200,
            headers={"Accept": "application/json"},
        ),
        ignore_field="...",
    )

    message = extract(record)
    logger.info("%s %s", message.summary, message.data)


if __name__ == "__main__":
    main()
