"""
Session Store - Redis-backed chat session repository

This module provides the persistence and query layer for chat sessions.

Storage layout (prefix defaults to settings.redis_key_prefix):
- {prefix}session:{id}    hash with id, userId, title, messages (JSON), createdAt
- {prefix}owner:{userId}  sorted set of session ids scored by createdAt (µs)

Every mutation is a single server-side Lua script, so create, update and
delete are atomic per session and owner checks happen inside Redis:
- create inserts only if the id is unused and indexes it in the same step
- update checks the owner and writes only the provided fields
- delete checks the owner and removes the hash and its index entry together

Reads are owner-scoped as well: a session that belongs to another user is
reported as not found, exactly like one that does not exist.

Pattern: Repository pattern
Pattern: Dependency injection for Redis client
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Union

from redis.asyncio import Redis
from redis.exceptions import RedisError

from chat_sessions.core.config import get_settings
from chat_sessions.core.exceptions import (
    InvalidArgumentError,
    SessionNotFoundError,
    StorageUnavailableError,
)
from chat_sessions.models.domain import (
    Message,
    Session,
    SessionPatch,
    normalize_title,
    parse_messages,
    require_owner_id,
    utc_now,
)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Largest index ZREVRANGE accepts (signed 64-bit)
_MAX_RANGE_INDEX = 2**63 - 1


# =============================================================================
# Lua Scripts
# =============================================================================

# KEYS: session key, owner index key
# ARGV: id, userId, title, messages, createdAt, score
CREATE_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
  return 0
end
redis.call('HSET', KEYS[1],
  'id', ARGV[1], 'userId', ARGV[2], 'title', ARGV[3],
  'messages', ARGV[4], 'createdAt', ARGV[5])
redis.call('ZADD', KEYS[2], ARGV[6], ARGV[1])
return 1
"""

# KEYS: session key
# ARGV: userId, then field/value pairs to write
UPDATE_SCRIPT = """
if redis.call('HGET', KEYS[1], 'userId') ~= ARGV[1] then
  return false
end
for i = 2, #ARGV, 2 do
  redis.call('HSET', KEYS[1], ARGV[i], ARGV[i + 1])
end
return redis.call('HGETALL', KEYS[1])
"""

# KEYS: session key, owner index key
# ARGV: userId, id
DELETE_SCRIPT = """
if redis.call('HGET', KEYS[1], 'userId') ~= ARGV[1] then
  return 0
end
redis.call('DEL', KEYS[1])
redis.call('ZREM', KEYS[2], ARGV[2])
return 1
"""


# =============================================================================
# Serialization Helpers
# =============================================================================


def _decode(value: Union[str, bytes]) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def _score(created_at: datetime) -> int:
    """Integer microseconds since the epoch, exact for sorted-set scores."""
    delta = created_at - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def _dump_messages(messages: Sequence[Message]) -> str:
    return json.dumps([m.model_dump(mode="json", by_alias=True) for m in messages])


def _session_from_hash(data: dict[Any, Any]) -> Session:
    """Rebuild a Session from a stored hash."""
    fields = {_decode(k): _decode(v) for k, v in data.items()}
    return Session.model_validate(
        {
            "id": fields["id"],
            "userId": fields["userId"],
            "title": fields["title"],
            "messages": json.loads(fields["messages"]),
            "createdAt": fields["createdAt"],
        }
    )


def _parse_page_value(value: Any, name: str, default: int) -> int:
    """
    Parse a limit/offset value.

    None and "" fall back to ``default``. Integers and integer strings are
    accepted when non-negative.

    Raises:
        InvalidArgumentError: For negative or unparsable values.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{name} must be a non-negative integer", field=name)

    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError as e:
            raise InvalidArgumentError(
                f"{name} must be a non-negative integer", field=name
            ) from e

    if number < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative integer", field=name)
    return number


# =============================================================================
# SessionStore Class
# =============================================================================


class SessionStore:
    """
    Redis-based chat session storage.

    Provides owner-scoped async CRUD operations for Session objects. The
    store keeps no mutable in-process state; all consistency comes from
    Redis executing each script atomically.

    Attributes:
        _redis: The Redis client instance.
        _key_prefix: Prefix for Redis keys.
        _default_limit: Page size used by list() when no limit is given.

    Example:
        >>> import redis.asyncio as redis
        >>> client = redis.from_url("redis://localhost:6379/0", decode_responses=True)
        >>> store = SessionStore(redis_client=client)
        >>> session = await store.create("user-1", "Trip planning", [])
        >>> await store.get(session.id, "user-1")
    """

    def __init__(
        self,
        redis_client: Redis,
        key_prefix: Optional[str] = None,
        default_limit: Optional[int] = None,
    ) -> None:
        """
        Initialize SessionStore with Redis client.

        Args:
            redis_client: Async Redis client instance.
            key_prefix: Prefix for all keys. Defaults to settings.redis_key_prefix.
            default_limit: Default list page size. Defaults to
                           settings.default_list_limit.
        """
        settings = get_settings()
        self._redis: Redis = redis_client
        self._key_prefix: str = key_prefix if key_prefix is not None else settings.redis_key_prefix
        self._default_limit: int = (
            default_limit if default_limit is not None else settings.default_list_limit
        )

        self._create_script = redis_client.register_script(CREATE_SCRIPT)
        self._update_script = redis_client.register_script(UPDATE_SCRIPT)
        self._delete_script = redis_client.register_script(DELETE_SCRIPT)

    def _session_key(self, session_id: str) -> str:
        return f"{self._key_prefix}session:{session_id}"

    def _owner_key(self, owner_id: str) -> str:
        return f"{self._key_prefix}owner:{owner_id}"

    # =========================================================================
    # create
    # =========================================================================

    async def create(
        self,
        owner_id: str,
        title: str,
        messages: Sequence[Union[Message, dict[str, Any]]],
    ) -> Session:
        """
        Create and persist a new session.

        The id (UUID4) and created_at are assigned here, never by the caller.

        Args:
            owner_id: Owning user identifier.
            title: Requested title; trimmed, blank becomes "Conversation".
            messages: Initial history, possibly empty.

        Returns:
            The stored Session including server-assigned fields.

        Raises:
            InvalidArgumentError: On a missing owner or malformed input.
            StorageUnavailableError: If Redis fails or the generated id
                is already taken.
        """
        owner_id = require_owner_id(owner_id)
        session = Session(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=normalize_title(title),
            messages=parse_messages(messages),
            created_at=utc_now(),
        )

        try:
            inserted = await self._create_script(
                keys=[self._session_key(session.id), self._owner_key(owner_id)],
                args=[
                    session.id,
                    owner_id,
                    session.title,
                    _dump_messages(session.messages),
                    session.created_at.isoformat(),
                    _score(session.created_at),
                ],
            )
        except RedisError as e:
            raise StorageUnavailableError(
                f"Failed to create session: {e}", operation="create"
            ) from e

        if not inserted:
            raise StorageUnavailableError(
                f"Session id already exists: {session.id}", operation="create"
            )
        return session

    # =========================================================================
    # list
    # =========================================================================

    async def list(
        self,
        owner_id: str,
        limit: Union[int, str, None] = None,
        offset: Union[int, str, None] = None,
    ) -> list[Session]:
        """
        List an owner's sessions, newest first.

        Sessions created at the same instant are ordered by id, descending,
        so repeated calls page identically.

        Args:
            owner_id: Owning user identifier.
            limit: Maximum sessions to return (default: settings value, 50).
            offset: Number of sessions to skip (default: 0).

        Raises:
            InvalidArgumentError: On a missing owner or bad limit/offset.
            StorageUnavailableError: If Redis fails.
        """
        owner_id = require_owner_id(owner_id)
        page_size = _parse_page_value(limit, "limit", self._default_limit)
        start = _parse_page_value(offset, "skip", 0)

        if page_size == 0 or start >= _MAX_RANGE_INDEX:
            return []
        end = min(start + page_size - 1, _MAX_RANGE_INDEX)

        try:
            session_ids = await self._redis.zrevrange(
                self._owner_key(owner_id), start, end
            )
            if not session_ids:
                return []

            pipe = self._redis.pipeline(transaction=False)
            for session_id in session_ids:
                pipe.hgetall(self._session_key(_decode(session_id)))
            rows = await pipe.execute()
        except RedisError as e:
            raise StorageUnavailableError(
                f"Failed to list sessions: {e}", operation="list"
            ) from e

        # A row can vanish between the two round trips if it was deleted
        return [_session_from_hash(row) for row in rows if row]

    # =========================================================================
    # get
    # =========================================================================

    async def get(self, session_id: str, owner_id: str) -> Session:
        """
        Retrieve a session owned by ``owner_id``.

        Raises:
            InvalidArgumentError: On a missing owner.
            SessionNotFoundError: If no session matches both id and owner.
            StorageUnavailableError: If Redis fails.
        """
        owner_id = require_owner_id(owner_id)
        try:
            data = await self._redis.hgetall(self._session_key(session_id))
        except RedisError as e:
            raise StorageUnavailableError(
                f"Failed to get session {session_id}: {e}", operation="get"
            ) from e

        if not data:
            raise SessionNotFoundError(session_id=session_id)

        session = _session_from_hash(data)
        if session.owner_id != owner_id:
            raise SessionNotFoundError(session_id=session_id)
        return session

    # =========================================================================
    # update
    # =========================================================================

    async def update(
        self,
        session_id: str,
        owner_id: str,
        patch: SessionPatch,
    ) -> Session:
        """
        Apply a partial update to an owned session.

        Only fields present in ``patch`` are written. A provided title goes
        through the same trim/default rule as create; provided messages
        replace the entire history. id, owner and created_at never change.

        Returns:
            The session as stored after the update.

        Raises:
            InvalidArgumentError: On a missing owner or malformed fields.
            SessionNotFoundError: If no session matches both id and owner.
            StorageUnavailableError: If Redis fails.
        """
        owner_id = require_owner_id(owner_id)

        changes: list[str] = []
        if patch.has_title:
            changes.extend(["title", normalize_title(patch.title)])
        if patch.has_messages:
            changes.extend(["messages", _dump_messages(parse_messages(patch.messages))])

        try:
            result = await self._update_script(
                keys=[self._session_key(session_id)],
                args=[owner_id, *changes],
            )
        except RedisError as e:
            raise StorageUnavailableError(
                f"Failed to update session {session_id}: {e}", operation="update"
            ) from e

        if not result:
            raise SessionNotFoundError(session_id=session_id)

        # HGETALL from a script comes back as a flat [field, value, ...] list
        return _session_from_hash(dict(zip(result[::2], result[1::2])))

    # =========================================================================
    # delete
    # =========================================================================

    async def delete(self, session_id: str, owner_id: str) -> None:
        """
        Permanently delete an owned session.

        Raises:
            InvalidArgumentError: On a missing owner.
            SessionNotFoundError: If no session matches both id and owner,
                including a session that was already deleted.
            StorageUnavailableError: If Redis fails.
        """
        owner_id = require_owner_id(owner_id)
        try:
            removed = await self._delete_script(
                keys=[self._session_key(session_id), self._owner_key(owner_id)],
                args=[owner_id, session_id],
            )
        except RedisError as e:
            raise StorageUnavailableError(
                f"Failed to delete session {session_id}: {e}", operation="delete"
            ) from e

        if not removed:
            raise SessionNotFoundError(session_id=session_id)

    # =========================================================================
    # Health
    # =========================================================================

    async def ping(self) -> bool:
        """
        Check the backend connection.

        Raises:
            StorageUnavailableError: If Redis cannot be reached.
        """
        try:
            return bool(await self._redis.ping())
        except RedisError as e:
            raise StorageUnavailableError(
                f"Redis ping failed: {e}", operation="ping"
            ) from e
