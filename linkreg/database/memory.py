"""In-memory link store for development and tests."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from .base import LinkStoreBase
from .models import Link


class MemoryLinkStore(LinkStoreBase):
    """Dict-backed store living in the current process.

    Every method mutates and reads without awaiting in between, so each call
    is atomic with respect to other coroutines on the same event loop. Data
    is not shared across uvicorn worker processes.
    """

    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[str, Link] = {}

    async def insert_link(self, link: Link) -> bool:
        if link.code in self._links:
            self.logger.debug(f"Short code already exists: {link.code}")
            return False
        self._links[link.code] = replace(link)
        return True

    async def get_link(self, code: str) -> Optional[Link]:
        link = self._links.get(code)
        return replace(link) if link else None

    async def record_hit(self, code: str, at: datetime) -> Optional[str]:
        link = self._links.get(code)
        if link is None:
            return None
        link.clicks += 1
        link.last_clicked_at = at
        link.updated_at = at
        return link.target_url

    async def list_links(self) -> List[Link]:
        # Reversed insertion order keeps newer links first among equal timestamps
        links = reversed(list(self._links.values()))
        return [replace(link) for link in sorted(links, key=lambda l: l.created_at, reverse=True)]

    async def delete_link(self, code: str) -> bool:
        return self._links.pop(code, None) is not None

    async def close(self) -> None:
        self._links.clear()

    async def health_check(self) -> bool:
        return True
