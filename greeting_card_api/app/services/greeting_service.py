"""
Service layer for greetings.

``GreetingService`` implements the two operations of the API:

* ``create_greeting`` validates a submitted greeting, stores it under a
  freshly generated identifier and returns a shareable URL.
* ``get_greeting`` validates an identifier and returns the stored
  greeting.

The service is constructed with a ``GreetingStore`` so the same logic
runs against SQLite, the in-memory demo store or a test double.  All
failures are raised as ``GreetingError`` subclasses; translating them to
HTTP responses is the job of the API layer.
"""

from __future__ import annotations

import logging
import re
import secrets
import string
from typing import List, Optional, Union

from greeting_card_api.app.core.errors import (
    GreetingConflictError,
    GreetingNotFoundError,
    GreetingStoreError,
    GreetingValidationError,
)
from greeting_card_api.app.schemas.greeting import (
    MAX_DAY_INDEX,
    MAX_MEMORY_LINE_LENGTH,
    MAX_MEMORY_LINES,
    MAX_MESSAGE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_QUOTE_LENGTH,
    MAX_SUBTITLE_LENGTH,
    GreetingCreate,
    GreetingCreated,
    GreetingExtras,
    GreetingRead,
    NewGreeting,
)
from greeting_card_api.app.services.greeting_store import GreetingStore

logger = logging.getLogger(__name__)

# URL-safe alphabet: identifiers appear verbatim in ``?id=`` query strings.
ID_ALPHABET = string.ascii_letters + string.digits + "_-"
ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
MAX_ID_LENGTH = 64


def generate_id(length: int = 8) -> str:
    """Return a random identifier of ``length`` characters."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def build_share_url(base_url: str, greeting_id: str) -> str:
    """Return the page URL that displays ``greeting_id``."""
    return f"{base_url.rstrip('/')}/?id={greeting_id}"


def _check_length(value: str, limit: int, label: str) -> None:
    if len(value) > limit:
        raise GreetingValidationError(f"{label} must be {limit} characters or less")


def _normalize_memories(memories: Optional[Union[List[str], str]]) -> List[str]:
    """Trim memory lines and drop blank ones.

    A single string is split on newlines, which is how the creation form
    submits its textarea.
    """
    if memories is None:
        return []
    lines = memories.splitlines() if isinstance(memories, str) else memories
    return [line.strip() for line in lines if line and line.strip()]


class GreetingService:
    """Create and look up greetings in a ``GreetingStore``."""

    def __init__(self, store: GreetingStore, *, id_length: int = 8, id_max_attempts: int = 3) -> None:
        self.store = store
        self.id_length = id_length
        self.id_max_attempts = max(1, id_max_attempts)

    @staticmethod
    def validate(data: GreetingCreate) -> NewGreeting:
        """Check a create request and return the trimmed greeting.

        Raises ``GreetingValidationError`` with code ``missing_fields``
        when sender or receiver is absent or blank, and with code
        ``validation_error`` when any value is out of bounds.
        """
        sender = (data.sender or "").strip()
        receiver = (data.receiver or "").strip()
        if not sender or not receiver:
            raise GreetingValidationError(
                "Both sender and receiver names are required",
                code="missing_fields",
            )
        _check_length(sender, MAX_NAME_LENGTH, "Sender name")
        _check_length(receiver, MAX_NAME_LENGTH, "Receiver name")

        message = (data.message or "").strip()
        _check_length(message, MAX_MESSAGE_LENGTH, "Message")

        day_index = data.day_index if data.day_index is not None else 0
        if not 0 <= day_index <= MAX_DAY_INDEX:
            raise GreetingValidationError(f"Day index must be between 0 and {MAX_DAY_INDEX}")

        subtitle = (data.subtitle or "").strip()
        _check_length(subtitle, MAX_SUBTITLE_LENGTH, "Subtitle")
        quote = (data.quote or "").strip()
        _check_length(quote, MAX_QUOTE_LENGTH, "Quote")

        memories = _normalize_memories(data.memories)
        if len(memories) > MAX_MEMORY_LINES:
            raise GreetingValidationError(f"At most {MAX_MEMORY_LINES} memory lines are allowed")
        for line in memories:
            _check_length(line, MAX_MEMORY_LINE_LENGTH, "Each memory line")

        return NewGreeting(
            sender=sender,
            receiver=receiver,
            message=message,
            day_index=day_index,
            extras=GreetingExtras(subtitle=subtitle, quote=quote, memories=memories),
        )

    @staticmethod
    def validate_id(greeting_id: Optional[str]) -> str:
        """Check that ``greeting_id`` is present and well formed."""
        if not greeting_id:
            raise GreetingValidationError("Greeting ID is required", code="missing_id")
        if len(greeting_id) > MAX_ID_LENGTH or not ID_PATTERN.fullmatch(greeting_id):
            raise GreetingValidationError(
                "Greeting ID contains invalid characters",
                code="invalid_id",
            )
        return greeting_id

    async def create_greeting(self, data: GreetingCreate, base_url: str) -> GreetingCreated:
        """Validate, store and return the identifier and shareable URL.

        A fresh identifier is drawn when the store reports a collision,
        up to ``id_max_attempts`` times.
        """
        greeting = self.validate(data)
        for attempt in range(1, self.id_max_attempts + 1):
            greeting_id = generate_id(self.id_length)
            try:
                await self.store.insert(greeting_id, greeting)
            except GreetingConflictError:
                logger.warning(
                    "Identifier collision on attempt %s/%s", attempt, self.id_max_attempts
                )
                continue
            logger.info("Created greeting %s for %s from %s", greeting_id, greeting.receiver, greeting.sender)
            return GreetingCreated(id=greeting_id, url=build_share_url(base_url, greeting_id))
        raise GreetingStoreError("Could not allocate a unique greeting identifier")

    async def get_greeting(self, greeting_id: Optional[str]) -> GreetingRead:
        """Return the greeting stored under ``greeting_id``.

        Raises ``GreetingNotFoundError`` when it does not exist.
        """
        greeting_id = self.validate_id(greeting_id)
        greeting = await self.store.get(greeting_id)
        if greeting is None:
            logger.debug("Greeting %s not found", greeting_id)
            raise GreetingNotFoundError()
        logger.debug("Fetched greeting %s", greeting_id)
        return greeting
