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

# RFC 4566 requirements that the line order grammar alone does not enforce.

from typing import Any, Dict, List

from .SdpErrors import SdpCheckError
from .SdpRules import MEDIA_DESCRIPTIONS, TIMING

SUPPORTED_VERSIONS = (0,)


def media_connections(description: Dict[str, Any], index: int) -> List[Dict[str, Any]]:
    """Connections that apply to a media description, its own or else the session one."""
    media = description.get(MEDIA_DESCRIPTIONS, [])[index]
    if media.get("connection"):
        return media["connection"]
    if "connection" in description:
        return [description["connection"]]
    return []


def check_sdp_base_requirements(description: Dict[str, Any]) -> None:
    """Check that a parsed description carries the mandatory SDP lines."""
    if "version" not in description:
        raise SdpCheckError("missing v= line")
    if description["version"] not in SUPPORTED_VERSIONS:
        raise SdpCheckError(f"invalid protocol version {description['version']}")

    if "origin" not in description:
        raise SdpCheckError("missing o= line")

    # values are left trimmed, so "s= " for a session without a name decodes as ""
    if "name" not in description:
        raise SdpCheckError("missing s= line")

    if not description.get(TIMING):
        raise SdpCheckError("missing t= line")

    for index in range(len(description.get(MEDIA_DESCRIPTIONS, []))):
        if not media_connections(description, index):
            raise SdpCheckError(f"missing c= line for media {index}")
