"""Runtime settings for shopcore."""

import os
from dataclasses import dataclass

DEFAULT_ACTOR = "system"
DEFAULT_ORDER_PREFIX = "ORD"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """
    Settings shared by the stores and the CLI.

    Each value can be overridden through an environment variable:
    SHOPCORE_ACTOR, SHOPCORE_ORDER_PREFIX and SHOPCORE_LOG_LEVEL.
    """

    actor: str = DEFAULT_ACTOR  # recorded as created_by/updated_by
    order_prefix: str = DEFAULT_ORDER_PREFIX
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            actor=os.environ.get("SHOPCORE_ACTOR") or DEFAULT_ACTOR,
            order_prefix=os.environ.get("SHOPCORE_ORDER_PREFIX") or DEFAULT_ORDER_PREFIX,
            log_level=(os.environ.get("SHOPCORE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )
