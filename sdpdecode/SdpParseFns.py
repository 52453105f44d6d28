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
Parse functions used to decode individual SDP field values.

A parse function takes the raw text of a field and returns its decoded
representation, raising ValueError when the text is not acceptable. The
functions are looked up by name through a ParserConfig, so that an application
can replace the representation of a field type (for example decoding instants
as datetime objects) without touching the field rules.
"""

import ipaddress
import re
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping

ParseFn = Callable[[str], Any]

INTEGER_RE = re.compile(r"[+-]?[0-9]+")
UNSIGNED_RE = re.compile(r"[0-9]+")
ALPHANUMERIC_RE = re.compile(r"[0-9A-Za-z]*")

MAX_TTL = 255
MAX_PORT = 65535


def parse_string(value: str) -> str:
    return value


def parse_integer(value: str) -> int:
    if not INTEGER_RE.fullmatch(value):
        raise ValueError(f"'{value}' is not an integer")
    return int(value)


def parse_unsigned(value: str) -> int:
    if not UNSIGNED_RE.fullmatch(value):
        raise ValueError(f"'{value}' is not an unsigned integer")
    return int(value)


def parse_numeric_string(value: str) -> str:
    if not ALPHANUMERIC_RE.fullmatch(value):
        raise ValueError(f"'{value}' is not alphanumeric")
    return value


def parse_instant(value: str) -> int:
    # NTP seconds do not fit a 32 bit integer, python ints have no such limit
    if not UNSIGNED_RE.fullmatch(value):
        raise ValueError(f"'{value}' is not a time")
    return int(value)


def parse_duration(value: str) -> str:
    return value


def integer_in_range(low: int, high: int) -> ParseFn:
    """Returns a parse function accepting integers between low and high inclusive."""
    # no sign is accepted when the range has no negative values
    parse_number = parse_unsigned if low >= 0 else parse_integer

    def parse(value: str) -> int:
        number = parse_number(value)
        if number < low or number > high:
            raise ValueError(f"{number} is outside of range [{low}, {high}]")
        return number
    return parse


parse_port = integer_in_range(0, MAX_PORT)
parse_ttl = integer_in_range(0, MAX_TTL)


def parse_ip_address(value: str) -> Dict[str, Any]:
    """
    Decodes a connection-address of the form address[/ttl][/number of addresses].

    IPv4 multicast addresses must carry a TTL. IPv6 addresses never carry one,
    their number of addresses follows an empty TTL segment (ff0e::1//3).
    """
    split = value.split('/')
    if len(split) > 3:
        raise ValueError(f"invalid connection-address '{value}'")
    try:
        address = ipaddress.ip_address(split[0])
    except ValueError:
        raise ValueError(f"'{split[0]}' is not an IPv4 or IPv6 address") from None

    result: Dict[str, Any] = {"address": split[0]}
    if address.version == 6:
        if len(split) == 2 or (len(split) == 3 and split[1]):
            raise ValueError("TTL not allowed for IPv6")
    elif len(split) == 1:
        if address.is_multicast:
            raise ValueError("multicast IPv4 address requires a TTL")
    else:
        result["ttl"] = parse_ttl(split[1])
    if len(split) == 3:
        result["address_count"] = parse_unsigned(split[2])
    return result


PARSE_FNS: Dict[str, ParseFn] = {
    "string": parse_string,
    "integer": parse_integer,
    "unsigned-integer": parse_unsigned,
    "numeric-string": parse_numeric_string,
    "instant": parse_instant,
    "duration": parse_duration,
    "ip-address": parse_ip_address,
    "unicast-address": parse_string,
    "email": parse_string,
    "phone": parse_string,
    "port": parse_port,
}


class ParserConfig:
    """Immutable table of named parse functions handed to the parser."""
    def __init__(self, parse_fns: Mapping[str, ParseFn]):
        for name, func in parse_fns.items():
            if not callable(func):
                raise TypeError(f"parse function for '{name}' is not callable")
        self._parse_fns = MappingProxyType(dict(parse_fns))

    @property
    def parse_fns(self) -> Mapping[str, ParseFn]:
        return self._parse_fns

    def parse_fn(self, name: str) -> ParseFn:
        try:
            return self._parse_fns[name]
        except KeyError:
            raise KeyError(f"no parse function named '{name}'") from None

    def with_parsers(self, parser_map: Mapping[str, ParseFn]) -> "ParserConfig":
        """Returns a new config with parser_map merged over this one."""
        merged = dict(self._parse_fns)
        merged.update(parser_map)
        return ParserConfig(merged)


DEFAULT_CONFIG = ParserConfig(PARSE_FNS)

# Process wide, read by every parse() call made without an explicit config.
# Not guarded by a lock: replace it before starting concurrent parses.
CURRENT_CONFIG = DEFAULT_CONFIG


def current_config() -> ParserConfig:
    return CURRENT_CONFIG


def use_custom_parsers(parser_map: Mapping[str, ParseFn]) -> ParserConfig:
    """
    Overrides the default parse functions with those in parser_map.

    The functions must accept the raw value as a string and return the parsed
    representation. This affects all future calls of parse() on all threads
    that do not pass their own config.
    """
    global CURRENT_CONFIG
    CURRENT_CONFIG = CURRENT_CONFIG.with_parsers(parser_map)
    return CURRENT_CONFIG


def reset_custom_parsers() -> ParserConfig:
    global CURRENT_CONFIG
    CURRENT_CONFIG = DEFAULT_CONFIG
    return CURRENT_CONFIG
