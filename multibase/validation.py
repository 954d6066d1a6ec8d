"""Input and environment checks performed before anything is queued or sent."""

import re
from typing import Iterable, Optional

from multibase.core.config.constants import BLOCKED_USER_AGENTS

_ADDRESS_RE = re.compile(r"(0x)?[0-9a-f]{40}", re.IGNORECASE)


def validate_address(address: str) -> bool:
    """Return True if ``address`` is a 40-hex-digit address, optionally 0x-prefixed."""
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None


def get_valid_address(address: str) -> Optional[str]:
    """Return the lowercase form of ``address``, or None if it is malformed."""
    if not validate_address(address):
        return None
    return address.lower()


def is_blocked_user_agent(
    user_agent: Optional[str], blocked: Iterable[str] = BLOCKED_USER_AGENTS
) -> bool:
    """Return True if ``user_agent`` carries a crawler or headless-browser signature."""
    if not user_agent:
        return False
    ua = user_agent.lower()
    return any(marker in ua for marker in blocked)
