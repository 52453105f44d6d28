# Copyright (C) 2025 Matrox Graphics Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import Any, Dict

from jsonschema import Draft7Validator

# Shape of a session description decoded with the default parse functions.
# Custom parse functions may legitimately produce descriptions that do not match.

_STRING = {"type": "string"}
_INTEGER = {"type": "integer"}
_NON_NEGATIVE = {"type": "integer", "minimum": 0}

_CONNECTION = {
    "type": "object",
    "properties": {
        "network_type": _STRING,
        "address_type": _STRING,
        "address": _STRING,
        "ttl": {"type": "integer", "minimum": 0, "maximum": 255},
        "address_count": _INTEGER,
    },
    "required": ["network_type", "address_type", "address"],
    "additionalProperties": False,
}

_BANDWIDTH = {
    "type": "object",
    "properties": {
        "bandwidth_type": _STRING,
        "bandwidth": _INTEGER,
    },
    "required": ["bandwidth_type", "bandwidth"],
    "additionalProperties": False,
}

_ATTRIBUTE = {
    "type": "object",
    "properties": {
        "attribute": _STRING,
        "value": _STRING,
    },
    "required": ["attribute"],
    "additionalProperties": False,
}

_ENCRYPTION_KEY = {
    "type": "object",
    "properties": {
        "method": _STRING,
        "payload": _STRING,
    },
    "required": ["method"],
    "additionalProperties": False,
}

_REPEAT = {
    "type": "object",
    "properties": {
        "repeat_interval": _STRING,
        "active_duration": _STRING,
        "offsets_from_start": _STRING,
    },
    "required": ["repeat_interval", "active_duration", "offsets_from_start"],
    "additionalProperties": False,
}

_TIMING = {
    "type": "object",
    "properties": {
        "start_time": _NON_NEGATIVE,
        "stop_time": _NON_NEGATIVE,
        "repeat": {"type": "array", "items": _REPEAT},
    },
    "required": ["start_time", "stop_time"],
    "additionalProperties": False,
}

_TIMEZONE = {
    "type": "object",
    "properties": {
        "adjustment_time": _NON_NEGATIVE,
        "offset": _STRING,
    },
    "required": ["adjustment_time", "offset"],
    "additionalProperties": False,
}

_MEDIA_DESCRIPTION = {
    "type": "object",
    "properties": {
        "media_type": _STRING,
        "port": {"type": "integer", "minimum": 0, "maximum": 65535},
        "protocol": _STRING,
        "format": _STRING,
        "information": _STRING,
        "connection": {"type": "array", "items": _CONNECTION},
        "bandwidth": {"type": "array", "items": _BANDWIDTH},
        "encryption_key": _ENCRYPTION_KEY,
        "attributes": {"type": "array", "items": _ATTRIBUTE},
    },
    "required": ["media_type", "port", "protocol", "format"],
    "additionalProperties": False,
}

SESSION_DESCRIPTION_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "SDP session description",
    "type": "object",
    "properties": {
        "version": _INTEGER,
        "origin": {
            "type": "object",
            "properties": {
                "username": _STRING,
                "session_id": {"type": "string", "pattern": "^[0-9A-Za-z]*$"},
                "session_version": _STRING,
                "network_type": _STRING,
                "address_type": _STRING,
                "address": _STRING,
            },
            "required": ["username", "session_id", "session_version",
                         "network_type", "address_type", "address"],
            "additionalProperties": False,
        },
        "name": _STRING,
        "information": _STRING,
        "uri": _STRING,
        "email": {"type": "array", "items": _STRING},
        "phone": {"type": "array", "items": _STRING},
        "connection": _CONNECTION,
        "bandwidth": {"type": "array", "items": _BANDWIDTH},
        "timing": {"type": "array", "items": _TIMING},
        "timezone": {"type": "array", "items": _TIMEZONE},
        "encryption_key": _ENCRYPTION_KEY,
        "attributes": {"type": "array", "items": _ATTRIBUTE},
        "media_descriptions": {"type": "array", "items": _MEDIA_DESCRIPTION},
    },
    "required": ["version", "origin", "name"],
    "additionalProperties": False,
}

Draft7Validator.check_schema(SESSION_DESCRIPTION_SCHEMA)
_VALIDATOR = Draft7Validator(SESSION_DESCRIPTION_SCHEMA)


def validate_description(description: Dict[str, Any]) -> None:
    """Raises jsonschema.ValidationError when description is not well formed."""
    _VALIDATOR.validate(description)


def description_errors(description: Dict[str, Any]):
    """All the schema violations of description, ordered by location."""
    return sorted(_VALIDATOR.iter_errors(description), key=lambda e: [str(p) for p in e.path])
