"""Link registry: code allocation, storage and resolution of short links."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from .shortcode import ShortCodeGenerator
from .database.base import LinkStoreBase
from .database.models import Link
from .common.validators import is_valid_url, is_valid_short_code
from .errors import (
    CodeConflict,
    ExhaustedCodeSpace,
    InvalidCode,
    InvalidTarget,
    LinkNotFound,
)


DEFAULT_MAX_CODE_ATTEMPTS = 10


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LinkRegistry:
    """Creates, resolves, lists and deletes short links.

    The registry holds no mutable state of its own. Every call is a fresh
    round-trip to the store, which enforces code uniqueness and performs the
    click increment atomically.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_code_attempts: int = DEFAULT_MAX_CODE_ATTEMPTS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize link registry.

        Args:
            store: Backing store instance
            code_generator: Optional short code generator
            logger: Optional logger
            max_code_attempts: Generated candidates tried before giving up
            clock: Optional callable returning the current UTC time
        """
        if max_code_attempts < 1:
            raise ValueError("max_code_attempts must be at least 1")

        self.store = store
        self.generator = code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_code_attempts = max_code_attempts
        self.clock = clock or utc_now

    async def create(self, target_url: str, code: Optional[str] = None) -> Link:
        """Create a new short link.

        Args:
            target_url: Absolute URL the link points to
            code: Optional caller-chosen short code

        Returns:
            The persisted link

        Raises:
            InvalidTarget: If target_url is not an absolute URL
            InvalidCode: If code is supplied but malformed
            CodeConflict: If code is supplied and already taken
            ExhaustedCodeSpace: If every generated candidate collided
            StorageFailure: On any backing store error
        """
        is_valid, error = is_valid_url(target_url)
        if not is_valid:
            raise InvalidTarget(f"Invalid URL: {error}")

        if code is not None:
            is_valid, error = is_valid_short_code(code)
            if not is_valid:
                raise InvalidCode(f"Invalid short code: {error}")

            link = self._new_link(code, target_url)
            if not await self.store.insert_link(link):
                self.logger.warning(f"Short code already taken: {code}")
                raise CodeConflict(code)
        else:
            link = await self._insert_with_generated_code(target_url)

        self.logger.info(f"Created short link: {link.code} -> {target_url}")
        return link

    async def resolve(self, code: str) -> str:
        """Resolve a code to its target and record the hit.

        Args:
            code: The short code to resolve

        Returns:
            The target URL

        Raises:
            LinkNotFound: If no live link has that code
        """
        if not ShortCodeGenerator.is_valid_format(code):
            raise LinkNotFound(code)

        target_url = await self.store.record_hit(code, self.clock())
        if target_url is None:
            self.logger.warning(f"Short code not found: {code}")
            raise LinkNotFound(code)

        self.logger.debug(f"Resolved {code} -> {target_url}")
        return target_url

    async def get(self, code: str) -> Link:
        """Get a link without touching its counters.

        Raises:
            LinkNotFound: If no live link has that code
        """
        if not ShortCodeGenerator.is_valid_format(code):
            raise LinkNotFound(code)

        link = await self.store.get_link(code)
        if link is None:
            raise LinkNotFound(code)
        return link

    async def list_links(self) -> List[Link]:
        """List all live links, newest first.

        No pagination: the whole table is returned.
        """
        return await self.store.list_links()

    async def delete(self, code: str) -> None:
        """Delete a link permanently.

        A second delete of the same code raises LinkNotFound; callers should
        treat that as "already gone".

        Raises:
            LinkNotFound: If no live link has that code
        """
        if not ShortCodeGenerator.is_valid_format(code):
            raise LinkNotFound(code)

        if not await self.store.delete_link(code):
            raise LinkNotFound(code)

        self.logger.info(f"Deleted short link: {code}")

    async def health_check(self) -> bool:
        return await self.store.health_check()

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()

    def _new_link(self, code: str, target_url: str) -> Link:
        now = self.clock()
        return Link(
            id=uuid.uuid4().hex,
            code=code,
            target_url=target_url,
            clicks=0,
            last_clicked_at=None,
            created_at=now,
            updated_at=now,
        )

    async def _insert_with_generated_code(self, target_url: str) -> Link:
        """Insert under random codes until one is free.

        Uniqueness is checked by the insert itself, so two concurrent
        creates can never both claim the same candidate.

        Raises:
            ExhaustedCodeSpace: If max_code_attempts candidates all collided
        """
        for attempt in range(1, self.max_code_attempts + 1):
            link = self._new_link(self.generator.generate_random(), target_url)
            if await self.store.insert_link(link):
                if attempt > 1:
                    self.logger.debug(f"Generated code after {attempt} attempts: {link.code}")
                return link

        self.logger.error(f"No free short code after {self.max_code_attempts} attempts")
        raise ExhaustedCodeSpace(self.max_code_attempts)
