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

"""
Static description of the SDP grammar (RFC 4566): which lines may follow
which, and how the value of each line type is decoded and inserted into the
session description.
"""

import re
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, NamedTuple, Optional, Tuple, Union


class LineType(Enum):
    Version           = "v"
    Origin            = "o"
    SessionName       = "s"
    Information       = "i"
    Uri               = "u"
    Email             = "e"
    Phone             = "p"
    Connection        = "c"
    Bandwidth         = "b"
    Timing            = "t"
    Repeat            = "r"
    TimeZone          = "z"
    EncryptionKey     = "k"
    Attribute         = "a"
    Media             = "m"

    def __str__(self) -> str:
        return self.value


class Section(Enum):
    Session = "session"
    Media   = "media"


class ParseMode(Enum):
    Strict  = "strict"   # any order or decode violation aborts the parse
    Relaxed = "relaxed"  # skip illegal lines, substitute defaults where a rule allows it


class InsertStrategy(Enum):
    Replace        = "replace"
    Append         = "append"
    AttachToLast   = "attach-to-last"
    AppendIntoLast = "append-into-last"


class Insertion(NamedTuple):
    strategy: InsertStrategy = InsertStrategy.Replace
    parent: Optional[str] = None


REPLACE = Insertion(InsertStrategy.Replace)
APPEND = Insertion(InsertStrategy.Append)


def in_last(parent: str) -> Insertion:
    """Set the value under the most recent entry of parent."""
    return Insertion(InsertStrategy.AttachToLast, parent)


def append_in_last(parent: str) -> Insertion:
    """Append the value to a sequence held by the most recent entry of parent."""
    return Insertion(InsertStrategy.AppendIntoLast, parent)


class RecoveryAction(Enum):
    DefaultTo = "default-to"


class OnFail(NamedTuple):
    action: RecoveryAction
    default: Any = None


def default_to(value: Any) -> OnFail:
    return OnFail(RecoveryAction.DefaultTo, value)


class SubFieldSpec(NamedTuple):
    name: str
    parse_as: str
    expect: Optional[FrozenSet[str]] = None
    optional: bool = False
    on_fail: Optional[OnFail] = None


class CompoundSpec(NamedTuple):
    separator: re.Pattern
    fields: Tuple[SubFieldSpec, ...]
    repeats: bool = False


class FieldRule(NamedTuple):
    name: str
    parse_as: Union[str, CompoundSpec]
    on_fail: Optional[OnFail] = None
    insert: Union[Insertion, Mapping[Section, Insertion]] = REPLACE
    expect: Optional[FrozenSet[str]] = None

    @property
    def is_compound(self) -> bool:
        return isinstance(self.parse_as, CompoundSpec)

    def insertion_for(self, section: Section) -> Insertion:
        if isinstance(self.insert, Insertion):
            return self.insert
        return self.insert.get(section, REPLACE)


def _follow(types: str) -> FrozenSet[LineType]:
    return frozenset(LineType(t) for t in types.split())


INITIAL_ALLOWED: FrozenSet[LineType] = _follow("v")

# Some lines in each description are REQUIRED and some are OPTIONAL, but all
# MUST appear in exactly the order given here.
LINE_ORDER: Dict[Section, Dict[LineType, FrozenSet[LineType]]] = {
    Section.Session: {
        LineType.Version:       _follow("o"),
        LineType.Origin:        _follow("s"),
        LineType.SessionName:   _follow("i u e p c b t z k a m"),
        LineType.Information:   _follow("u e p c b t z k a m"),
        LineType.Uri:           _follow("e p c b t z k a m"),
        LineType.Email:         _follow("e p c b t z k a m"),
        LineType.Phone:         _follow("p c b t z k a m"),
        LineType.Connection:    _follow("b t z k a m"),
        LineType.Bandwidth:     _follow("t z k a m"),
        LineType.Timing:        _follow("t r z k a m"),
        LineType.Repeat:        _follow("t z k a m"),
        LineType.TimeZone:      _follow("k a m"),
        LineType.EncryptionKey: _follow("a m"),
        LineType.Attribute:     _follow("a m"),
    },
    Section.Media: {
        LineType.Media:         _follow("m i c b k a"),
        LineType.Information:   _follow("m c b k a"),
        LineType.Connection:    _follow("m b k a"),
        LineType.Bandwidth:     _follow("m k a"),
        LineType.EncryptionKey: _follow("m a"),
        LineType.Attribute:     _follow("m a"),
    },
}

WHITESPACE = re.compile(r"\s+")
COLON = re.compile(r":")

NETWORK_TYPES = frozenset({"IN"})
ADDRESS_TYPES = frozenset({"IP4", "IP6"})
BANDWIDTH_TYPES = frozenset({"CT", "AS"})
KEY_METHODS = frozenset({"clear", "base64", "uri", "prompt"})
MEDIA_TYPES = frozenset({"audio", "video", "text", "application", "message"})
MEDIA_PROTOCOLS = frozenset({"udp", "RTP/AVP", "RTP/SAVP"})

MEDIA_DESCRIPTIONS = "media_descriptions"
TIMING = "timing"

# The rules that determine how each line type is decoded and inserted.
PARSE_RULES: Dict[LineType, FieldRule] = {
    LineType.Version: FieldRule(
        name="version",
        parse_as="integer",
        on_fail=default_to(0)),
    LineType.Origin: FieldRule(
        name="origin",
        parse_as=CompoundSpec(WHITESPACE, (
            SubFieldSpec("username", "string"),
            SubFieldSpec("session_id", "numeric-string"),
            SubFieldSpec("session_version", "string"),
            SubFieldSpec("network_type", "string", NETWORK_TYPES),
            SubFieldSpec("address_type", "string", ADDRESS_TYPES),
            SubFieldSpec("address", "unicast-address"),
        ))),
    LineType.SessionName: FieldRule(
        name="name",
        parse_as="string",
        on_fail=default_to(" ")),
    LineType.Information: FieldRule(
        name="information",
        parse_as="string",
        insert={Section.Media: in_last(MEDIA_DESCRIPTIONS)}),
    LineType.Uri: FieldRule(
        name="uri",
        parse_as="string"),
    LineType.Email: FieldRule(
        name="email",
        parse_as="email",
        insert=APPEND),
    LineType.Phone: FieldRule(
        name="phone",
        parse_as="phone",
        insert=APPEND),
    LineType.Connection: FieldRule(
        name="connection",
        parse_as=CompoundSpec(WHITESPACE, (
            SubFieldSpec("network_type", "string", NETWORK_TYPES),
            SubFieldSpec("address_type", "string", ADDRESS_TYPES),
            SubFieldSpec("address", "ip-address"),
        )),
        insert={Section.Media: append_in_last(MEDIA_DESCRIPTIONS)}),
    LineType.Bandwidth: FieldRule(
        name="bandwidth",
        parse_as=CompoundSpec(COLON, (
            SubFieldSpec("bandwidth_type", "string", BANDWIDTH_TYPES),
            SubFieldSpec("bandwidth", "unsigned-integer"),
        )),
        insert={Section.Session: APPEND,
                Section.Media: append_in_last(MEDIA_DESCRIPTIONS)}),
    LineType.Timing: FieldRule(
        name=TIMING,
        parse_as=CompoundSpec(WHITESPACE, (
            SubFieldSpec("start_time", "instant"),
            SubFieldSpec("stop_time", "instant"),
        )),
        insert=APPEND),
    LineType.Repeat: FieldRule(
        name="repeat",
        parse_as=CompoundSpec(WHITESPACE, (
            SubFieldSpec("repeat_interval", "duration"),
            SubFieldSpec("active_duration", "duration"),
            SubFieldSpec("offsets_from_start", "duration"),
        )),
        insert=append_in_last(TIMING)),
    LineType.TimeZone: FieldRule(
        name="timezone",
        parse_as=CompoundSpec(WHITESPACE, (
            SubFieldSpec("adjustment_time", "instant"),
            SubFieldSpec("offset", "duration"),
        ), repeats=True)),
    LineType.EncryptionKey: FieldRule(
        name="encryption_key",
        parse_as=CompoundSpec(COLON, (
            SubFieldSpec("method", "string", KEY_METHODS),
            SubFieldSpec("payload", "string", optional=True),
        )),
        insert={Section.Media: in_last(MEDIA_DESCRIPTIONS)}),
    LineType.Attribute: FieldRule(
        name="attributes",
        parse_as=CompoundSpec(COLON, (
            SubFieldSpec("attribute", "string"),
            SubFieldSpec("value", "string", optional=True),
        )),
        insert={Section.Session: APPEND,
                Section.Media: append_in_last(MEDIA_DESCRIPTIONS)}),
    LineType.Media: FieldRule(
        name=MEDIA_DESCRIPTIONS,
        parse_as=CompoundSpec(WHITESPACE, (
            SubFieldSpec("media_type", "string", MEDIA_TYPES),
            SubFieldSpec("port", "port"),
            SubFieldSpec("protocol", "string", MEDIA_PROTOCOLS),
            SubFieldSpec("format", "string"),
        )),
        insert=APPEND),
}


def check_parse_rules():
    missing = [t for t in LineType if t not in PARSE_RULES]
    if missing:
        raise ValueError(f"no parse rule for line types {missing}")
    for section, table in LINE_ORDER.items():
        for line_type, follow in table.items():
            if not follow:
                raise ValueError(f"empty transition for {line_type} in {section.value} section")

check_parse_rules()
