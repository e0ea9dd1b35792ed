# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""JSON log format as ingested by splunk"""

import json
import logging
from enum import Enum
from datetime import datetime

from pydantic import BaseModel


class SplunkExtendedLogEntry(BaseModel):
    """
    Log message carrying additional structured fields.

    Passed as message to the logger, the splunk formatter renders every field
    as its own json key. Other formatters get the message followed by key=value pairs.
    """

    message: str

    def extended_fields(self) -> dict[str, object]:
        fields = {}
        for name, value in iter(self):
            if name == "message" or value is None:
                continue
            fields[name] = value.value if isinstance(value, Enum) else value
        return fields

    def __str__(self) -> str:
        pairs = [f"{name}={value}" for name, value in self.extended_fields().items()]
        return " ".join([self.message, *pairs])


class SplunkFormatter(logging.Formatter):
    def __init__(self, defaults: dict[str, str] | None = None) -> None:
        super().__init__()
        self._defaults = defaults or {}

    def _from_record(self, record: logging.LogRecord, attribute: str) -> str | None:
        return getattr(record, attribute, None) or self._defaults.get(attribute)

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "@timestamp": datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "app": self._from_record(record, "app_name"),
            "hash": self._from_record(record, "correlation_id"),
        }
        if isinstance(record.msg, SplunkExtendedLogEntry):
            entry.update(record.msg.extended_fields())
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
