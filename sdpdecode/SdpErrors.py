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

from typing import Any, FrozenSet, NamedTuple, Optional


class SdpError(Exception):
    """Base class of every fatal SDP decoding error."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MalformedLine(SdpError):
    """A line without the '=' separator between its type and its value."""
    def __init__(self, line_number: int, text: str):
        self.line_number = line_number
        self.text = text
        super().__init__(f"missing = character on line {line_number}: '{text}'")


class IllegalLineOrder(SdpError):
    """A line type that the grammar does not allow at this position."""
    def __init__(self, expected: FrozenSet[str], received: str, line_number: int):
        self.expected = expected
        self.received = received
        self.line_number = line_number
        super().__init__(f"illegal line type '{received}' on line {line_number}, "
                         f"expected one of {format_set(expected)}")


class FieldDecodeError(SdpError):
    """A value that the decode function of its field rejected."""
    def __init__(self, field: str, value: str, line_number: int, reason: str = ""):
        self.field = field
        self.value = value
        self.line_number = line_number
        self.reason = reason
        message = f"bad value '{value}' for {field} on line {line_number}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SdpCheckError(SdpError):
    """Custom exception for SDP base requirement violations."""


class NonStandardValue(NamedTuple):
    """Diagnostic only: a decoded value outside the recommended set of its field."""
    field: str
    value: Any
    line_number: int
    expected: FrozenSet[str]

    def __str__(self) -> str:
        return (f"non-standard value '{self.value}' for {self.field} on line {self.line_number}, "
                f"expected one of {format_set(self.expected)}")


def format_set(types: Optional[FrozenSet[str]]) -> str:
    if not types:
        return "{}"
    return "{" + ", ".join(sorted(str(t) for t in types)) + "}"
