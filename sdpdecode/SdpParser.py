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
Decoding of SDP text into its session description structure.

Lines are processed one at a time, in order: each one is split into its type
and value, tagged with the section it belongs to, checked against the line
order grammar, decoded according to its field rule and finally inserted into
the description. The stages return (result, error) pairs; parse() raises the
first fatal error, which abandons the remaining lines.
"""

import logging
import re
from typing import Any, Dict, FrozenSet, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from . import SdpParseFns
from .SdpErrors import FieldDecodeError, IllegalLineOrder, MalformedLine, NonStandardValue, SdpError
from .SdpParseFns import ParserConfig
from .SdpRules import (
    INITIAL_ALLOWED,
    LINE_ORDER,
    PARSE_RULES,
    CompoundSpec,
    FieldRule,
    InsertStrategy,
    Insertion,
    LineType,
    OnFail,
    ParseMode,
    RecoveryAction,
    Section,
    SubFieldSpec,
)

logger = logging.getLogger(__name__)


class RawLine(NamedTuple):
    text: str
    line_number: int


class TypedLine(NamedTuple):
    type: LineType
    value: str
    line_number: int
    section: Section


class ParserContext(NamedTuple):
    """State threaded from one line to the next."""
    section: Section = Section.Session
    allowed: FrozenSet[LineType] = INITIAL_ALLOWED


LINE_END = re.compile(r"\r?\n")


def split_lines(text: str) -> List[RawLine]:
    """
    Numbers the lines of text from 1, dropping the blank ones.

    Lines end with LF or CRLF only, text fields may carry any other separator.
    """
    return [RawLine(line, number) for number, line in enumerate(LINE_END.split(text), start=1)
            if line.strip()]


def tokenize(raw: RawLine) -> Tuple[Optional[Tuple[str, str]], Optional[SdpError]]:
    if '=' not in raw.text:
        return None, MalformedLine(raw.line_number, raw.text)
    key, value = raw.text.split('=', 1)
    return (key.strip(), value.lstrip()), None


def classify_section(ctx: ParserContext, line_type: LineType) -> ParserContext:
    # once in the media section there is no way back to the session section
    if line_type is LineType.Media:
        return ctx._replace(section=Section.Media)
    return ctx


def check_line_order(ctx: ParserContext, line: TypedLine,
                     mode: ParseMode) -> Tuple[ParserContext, bool, Optional[SdpError]]:
    """
    Returns the updated context, whether the line is accepted and the error
    that must abort the parse if any.
    """
    if line.type in ctx.allowed:
        follow = LINE_ORDER[line.section].get(line.type)
        if follow:
            ctx = ctx._replace(allowed=follow)
        return ctx, True, None

    expected = frozenset(str(t) for t in ctx.allowed)
    if mode is ParseMode.Strict:
        return ctx, False, IllegalLineOrder(expected, str(line.type), line.line_number)

    logger.warning(f"Skipping illegal line type '{line.type}' on line {line.line_number}, "
                   f"expected one of {sorted(expected)}")
    return ctx, False, None


def default_to(name: str, value: str, default: Any, line_number: int) -> Any:
    logger.info(f"Bad value '{value}' for {name} on line {line_number}, "
                f"substituting default value '{default}'")
    return default


RECOVERY_FNS = {
    RecoveryAction.DefaultTo: default_to,
}


def recover(name: str, value: str, line_number: int, mode: ParseMode,
            on_fail: Optional[OnFail], reason: str) -> Tuple[Any, Optional[SdpError]]:
    if on_fail is None or mode is ParseMode.Strict:
        return None, FieldDecodeError(name, value, line_number, reason)
    return RECOVERY_FNS[on_fail.action](name, value, on_fail.default, line_number), None


def decode_value(name: str, parse_as: str, value: str, line_number: int, mode: ParseMode,
                 config: ParserConfig, expect: Optional[FrozenSet[str]] = None,
                 on_fail: Optional[OnFail] = None) -> Tuple[Any, Optional[SdpError]]:
    """Decodes an atomic value with the parse function named parse_as."""
    parse_fn = config.parse_fn(parse_as)
    try:
        parsed = parse_fn(value)
    except Exception as e:  # parse functions may be supplied by the application
        return recover(name, value, line_number, mode, on_fail, str(e))

    if expect is not None and isinstance(parsed, str) and parsed not in expect:
        logger.debug(str(NonStandardValue(name, parsed, line_number, expect)))
    return parsed, None


def decode_group(fields: Sequence[SubFieldSpec], tokens: Sequence[str], line_number: int,
                 mode: ParseMode, config: ParserConfig) -> Tuple[Optional[Dict[str, Any]], Optional[SdpError]]:
    group: Dict[str, Any] = {}
    for index, field in enumerate(fields):
        if index < len(tokens):
            parsed, err = decode_value(field.name, field.parse_as, tokens[index], line_number,
                                       mode, config, field.expect, field.on_fail)
        elif field.optional:
            continue
        else:
            parsed, err = recover(field.name, "", line_number, mode, field.on_fail, "missing value")
        if err:
            return None, err
        # a decoder returning a mapping keyed by the field itself extends the group
        if isinstance(parsed, Mapping) and field.name in parsed:
            group.update(parsed)
        else:
            group[field.name] = parsed
    return group, None


def decode_compound(spec: CompoundSpec, value: str, line_number: int, mode: ParseMode,
                    config: ParserConfig) -> Tuple[Any, Optional[SdpError]]:
    value = value.strip()
    if not spec.repeats:
        # the last field keeps the remainder of the value
        tokens = spec.separator.split(value, maxsplit=len(spec.fields) - 1)
        return decode_group(spec.fields, tokens, line_number, mode, config)

    tokens = spec.separator.split(value)
    width = len(spec.fields)
    groups = []
    for start in range(0, len(tokens), width):
        group, err = decode_group(spec.fields, tokens[start:start + width], line_number, mode, config)
        if err:
            return None, err
        groups.append(group)
    return groups, None


def decode_field(rule: FieldRule, line: TypedLine, mode: ParseMode,
                 config: ParserConfig) -> Tuple[Any, Optional[SdpError]]:
    if not rule.is_compound:
        return decode_value(rule.name, rule.parse_as, line.value, line.line_number,
                            mode, config, rule.expect, rule.on_fail)

    parsed, err = decode_compound(rule.parse_as, line.value, line.line_number, mode, config)
    if err and rule.on_fail is not None:
        return recover(rule.name, line.value, line.line_number, mode, rule.on_fail, err.message)
    return parsed, err


def insert_field(description: Dict[str, Any], insertion: Insertion, name: str,
                 value: Any) -> Optional[SdpError]:
    if insertion.strategy is InsertStrategy.Replace:
        description[name] = value
        return None
    if insertion.strategy is InsertStrategy.Append:
        description.setdefault(name, []).append(value)
        return None

    # the line order grammar guarantees a parent entry exists
    parents = description.get(insertion.parent)
    if not parents:
        return SdpError(f"no {insertion.parent} entry to insert {name} into")
    if insertion.strategy is InsertStrategy.AttachToLast:
        parents[-1][name] = value
    else:
        parents[-1].setdefault(name, []).append(value)
    return None


def parse_line(ctx: ParserContext, description: Dict[str, Any], raw: RawLine, mode: ParseMode,
               config: ParserConfig) -> Tuple[ParserContext, Optional[SdpError]]:
    token, err = tokenize(raw)
    if err:
        return ctx, err
    key, value = token

    try:
        line_type = LineType(key)
    except ValueError:
        logger.warning(f"Ignoring line with unknown type '{key}' on line {raw.line_number}")
        return ctx, None

    # the section only changes once the line is accepted
    candidate = classify_section(ctx, line_type)
    line = TypedLine(line_type, value, raw.line_number, candidate.section)

    candidate, accepted, err = check_line_order(candidate, line, mode)
    if err or not accepted:
        return ctx, err
    ctx = candidate

    rule = PARSE_RULES[line.type]
    parsed, err = decode_field(rule, line, mode, config)
    if err:
        return ctx, err
    return ctx, insert_field(description, rule.insertion_for(line.section), rule.name, parsed)


def parse(text: str, mode: Union[ParseMode, str] = ParseMode.Strict,
          config: Optional[ParserConfig] = None) -> Dict[str, Any]:
    """
    Parses the SDP text and returns its session description.

    In relaxed mode lines out of order are skipped, leaving the section and the
    expected line types unchanged, and values of fields with a default are
    replaced by it; both are logged. Any other violation raises
    the corresponding SdpError. Without config, the process wide parse
    functions (see SdpParseFns.use_custom_parsers) are used.
    """
    mode = ParseMode(mode)
    if config is None:
        config = SdpParseFns.current_config()

    ctx = ParserContext()
    description: Dict[str, Any] = {}
    for raw in split_lines(text):
        ctx, err = parse_line(ctx, description, raw, mode, config)
        if err:
            raise err
    return description
