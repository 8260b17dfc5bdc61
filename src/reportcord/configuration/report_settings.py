import os
from typing import Any, Dict, List, Mapping

# Environment variable name -> key inside the ``reports`` config section
ENV_OVERRIDES: Dict[str, str] = {
    "MOD_CHANNEL_ID": "moderation_channel_id",
    "MOD_ROLE_ID": "moderator_role_id",
    "REPORT_EMOJI_ID": "trigger_emoji_id",
    "REPORT_EMOJI_NAME": "trigger_emoji_name",
}

DEFAULT_EMOJI_NAME = "report"
DEFAULT_EXCERPT_LIMIT = 1024
DEFAULT_ATTACHMENT_TIMEOUT = 10.0


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ReportSettings:
    """Helper exposing typed accessors for the report workflow configuration.

    Like the other settings helpers this keeps a plain mapping and converts on
    access, so a malformed value degrades to its default instead of failing at
    startup.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    @classmethod
    def from_environment(
        cls,
        data: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "ReportSettings":
        """Build settings from a config mapping with environment overrides applied."""
        environ = os.environ if environ is None else environ
        merged: Dict[str, Any] = dict(data or {})
        for env_name, key in ENV_OVERRIDES.items():
            value = environ.get(env_name)
            if value:
                merged[key] = value
        return cls(merged)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for `key` or `default` if missing."""
        return self.data.get(key, default)

    def as_dict(self) -> Dict[str, Any]:
        return self.data

    @property
    def moderation_channel_id(self) -> int | None:
        return _optional_int(self.data.get("moderation_channel_id"))

    @property
    def moderator_role_id(self) -> int | None:
        return _optional_int(self.data.get("moderator_role_id"))

    @property
    def trigger_emoji_id(self) -> int | None:
        return _optional_int(self.data.get("trigger_emoji_id"))

    @property
    def trigger_emoji_name(self) -> str:
        value = self.data.get("trigger_emoji_name")
        return str(value) if value else DEFAULT_EMOJI_NAME

    @property
    def content_excerpt_limit(self) -> int:
        limit = _optional_int(self.data.get("content_excerpt_limit"))
        # Discord rejects embed field values longer than 1024 characters
        if limit is None or limit <= 0:
            return DEFAULT_EXCERPT_LIMIT
        return min(limit, DEFAULT_EXCERPT_LIMIT)

    @property
    def attachment_timeout_seconds(self) -> float:
        try:
            return float(self.data.get("attachment_timeout_seconds", DEFAULT_ATTACHMENT_TIMEOUT))
        except (TypeError, ValueError):
            return DEFAULT_ATTACHMENT_TIMEOUT

    @property
    def command_guild_ids(self) -> List[int]:
        raw = self.data.get("command_guild_ids") or []
        if not isinstance(raw, (list, tuple)):
            raw = [raw]
        return [gid for gid in (_optional_int(item) for item in raw) if gid is not None]
