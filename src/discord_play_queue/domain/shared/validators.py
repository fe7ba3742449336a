"""Plain validation functions shared by settings validators and dataclass ``__post_init__``."""

from discord_play_queue.domain.shared.messages import ErrorMessages

SNOWFLAKE_LIMIT = 2**64


def validate_discord_snowflake(value: int) -> int:
    """Return *value* if it is a usable Discord ID (guild, channel or user).

    Raises:
        ValueError: for zero, negative, or IDs that do not fit in 64 bits.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= SNOWFLAKE_LIMIT:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_non_empty_string(value: str, field_name: str = "value") -> str:
    # Whitespace is kept; only all-blank input is refused.
    if not value.strip():
        raise ValueError(ErrorMessages.FIELD_CANNOT_BE_EMPTY.format(field_name=field_name))
    return value
