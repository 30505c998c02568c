"""Password-recovery deep link parsing."""

from dataclasses import dataclass
from urllib.parse import parse_qs

RECOVERY_MARKER = "type=recovery"


@dataclass(frozen=True)
class RecoveryTokens:
    """Session tokens carried by a password-reset link."""

    access_token: str
    refresh_token: str

    def as_dict(self) -> dict[str, str]:
        return {"access_token": self.access_token, "refresh_token": self.refresh_token}


def parse_recovery_tokens(url: str | None) -> RecoveryTokens | None:
    """
    Extract recovery session tokens from a deep link.

    Parameters are read from the URL fragment, or from the query string when
    there is no fragment. ``type`` must be exactly ``recovery`` and appear only
    once with that value.

    Args:
        url: Deep link the app was opened with

    Returns:
        RecoveryTokens, or None if the URL is not a complete recovery link
    """
    if not url or RECOVERY_MARKER not in url:
        return None

    if "#" in url:
        params_str = url.split("#", 1)[1]
    elif "?" in url:
        params_str = url.split("?", 1)[1]
    else:
        return None

    params = parse_qs(params_str, keep_blank_values=False)
    access_token = params.get("access_token", [None])[0]
    refresh_token = params.get("refresh_token", [None])[0]
    link_types = params.get("type", [])

    if not access_token or not refresh_token:
        return None
    if link_types != ["recovery"]:
        return None

    return RecoveryTokens(access_token=access_token, refresh_token=refresh_token)
