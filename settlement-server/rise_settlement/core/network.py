"""Address matching against configured IP / CIDR lists."""

from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


def ip_in_networks(address: Optional[str], networks: Iterable[str]) -> bool:
    """True when ``address`` falls inside any entry; malformed entries are skipped."""
    if not address:
        return False
    try:
        ip = ipaddress.ip_address(address.strip())
    except ValueError:
        return False
    for entry in networks:
        try:
            if ip in ipaddress.ip_network(entry, strict=False):
                return True
        except ValueError:
            logger.warning("Ignoring malformed network entry %r", entry)
    return False
