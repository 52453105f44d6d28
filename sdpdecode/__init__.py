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
Decoder for the Session Description Protocol (RFC 4566).

    from sdpdecode import EXAMPLE_SDP, ParseMode, parse

    description = parse(EXAMPLE_SDP)
    description = parse(text, ParseMode.Relaxed)
"""

from .SdpCheck import check_sdp_base_requirements, media_connections
from .SdpErrors import (
    FieldDecodeError,
    IllegalLineOrder,
    MalformedLine,
    NonStandardValue,
    SdpCheckError,
    SdpError,
)
from .SdpParseFns import (
    DEFAULT_CONFIG,
    ParserConfig,
    current_config,
    integer_in_range,
    reset_custom_parsers,
    use_custom_parsers,
)
from .SdpParser import parse
from .SdpRules import LineType, ParseMode, Section
from .SdpSchema import SESSION_DESCRIPTION_SCHEMA, validate_description

# The mime-type string to be used for SDP data.
MIME_TYPE = "application/sdp"

# Example session description of RFC 4566 section 5.
EXAMPLE_SDP = (
    "v=0\n"
    "o=jdoe 2890844526 2890842807 IN IP4 10.47.16.5\n"
    "s=SDP Seminar\n"
    "i=A Seminar on the session description protocol\n"
    "u=http://www.example.com/seminars/sdp.pdf\n"
    "e=j.doe@example.com (Jane Doe)\n"
    "c=IN IP4 224.2.17.12/127\n"
    "t=2873397496 2873404696\n"
    "a=recvonly\n"
    "m=audio 49170 RTP/AVP 0\n"
    "m=video 51372 RTP/AVP 99\n"
    "a=rtpmap:99 h263-1998/90000\n"
)

__all__ = [
    "DEFAULT_CONFIG",
    "EXAMPLE_SDP",
    "MIME_TYPE",
    "SESSION_DESCRIPTION_SCHEMA",
    "FieldDecodeError",
    "IllegalLineOrder",
    "LineType",
    "MalformedLine",
    "NonStandardValue",
    "ParseMode",
    "ParserConfig",
    "SdpCheckError",
    "SdpError",
    "Section",
    "check_sdp_base_requirements",
    "current_config",
    "integer_in_range",
    "media_connections",
    "parse",
    "reset_custom_parsers",
    "use_custom_parsers",
    "validate_description",
]
