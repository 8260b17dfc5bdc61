"""
Type-safe wrapper classes for Discord identifiers.

Discord snowflakes are 64-bit integers, but they travel as strings in JSON and
in component custom IDs. These wrappers keep user, guild, channel and message
IDs from being mixed up while the report workflow passes them around.
"""

from __future__ import annotations

from typing import Union


class Snowflake:
    """
    Base wrapper for a Discord snowflake ID.

    The value is stored as a canonical decimal string. Instances compare equal
    to other instances of the same class, to the matching ``int`` and to the
    matching string, so they can be used directly as dictionary keys.

    Example:
        >>> uid = UserID(123456789012345678)
        >>> uid.to_int()
        123456789012345678
        >>> str(uid)
        '123456789012345678'
        >>> UserID("123456789012345678") == 123456789012345678
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        """
        Initialize from a string, int, or another wrapper of the same kind.

        Raises:
            ValueError: If the value cannot be converted to a valid snowflake.
        """
        if isinstance(value, type(self)):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool: {value}")
        elif isinstance(value, int):
            self._value = str(value)
        elif isinstance(value, str):
            self._value = str(int(value.strip()))
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

        if int(self._value) < 0:
            raise ValueError(f"{type(self).__name__} cannot be negative: {value}")

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    @classmethod
    def from_object(cls, obj):
        """Create a wrapper from any Discord object exposing an ``id`` attribute."""
        return cls(obj.id)

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def __int__(self) -> int:
        return int(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, type(self)):
            return self._value == other._value
        if isinstance(other, Snowflake):
            return False
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class UserID(Snowflake):
    """Snowflake ID of a Discord user or member."""

    __slots__ = ()

    @classmethod
    def from_user(cls, user) -> "UserID":
        return cls(user.id)


class GuildID(Snowflake):
    """Snowflake ID of a Discord guild."""

    __slots__ = ()

    @classmethod
    def from_guild(cls, guild) -> "GuildID":
        return cls(guild.id)


class ChannelID(Snowflake):
    """Snowflake ID of a guild channel or thread."""

    __slots__ = ()

    @classmethod
    def from_channel(cls, channel) -> "ChannelID":
        return cls(channel.id)


class MessageID(Snowflake):
    """Snowflake ID of a Discord message."""

    __slots__ = ()

    @classmethod
    def from_message(cls, message) -> "MessageID":
        return cls(message.id)
