import logging
from typing import Any

import sentry_sdk
from decouple import config
from dotenv import load_dotenv
from sentry_sdk.integrations.logging import LoggingIntegration

load_dotenv()


def str_to_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "True", "yes", "on")


def get_envs(env_key: str, cast, default=None) -> str | int | float | bool | Any:
    if cast == bool:
        cast = str_to_bool
    return config(env_key, cast=cast, default=default)


REDIS_URL = get_envs("REDIS_URL", cast=str, default="redis://localhost:6379/0")

RATING_SCALE_MAX = get_envs("RATING_SCALE_MAX", cast=int, default=5)

LAYOUT_LINK_DISTANCE = get_envs("LAYOUT_LINK_DISTANCE", cast=float, default=120.0)
LAYOUT_CHARGE_STRENGTH = get_envs("LAYOUT_CHARGE_STRENGTH", cast=float, default=-250.0)
LAYOUT_COLLIDE_RADIUS = get_envs("LAYOUT_COLLIDE_RADIUS", cast=float, default=90.0)
LAYOUT_ITERATIONS = get_envs("LAYOUT_ITERATIONS", cast=int, default=200)
LAYOUT_SEED = get_envs("LAYOUT_SEED", cast=int, default=42)
LAYOUT_CONVERGENCE_THRESHOLD = get_envs(
    "LAYOUT_CONVERGENCE_THRESHOLD", cast=float, default=0.0
)
LAYOUT_LARGE_GRAPH_WARNING = get_envs("LAYOUT_LARGE_GRAPH_WARNING", cast=int, default=300)

INFLUENCE_TOP_K = get_envs("INFLUENCE_TOP_K", cast=int, default=10)
MAX_SUGGESTIONS_PER_PERSON = get_envs("MAX_SUGGESTIONS_PER_PERSON", cast=int, default=5)
COMMUNITY_DETECTOR = get_envs("COMMUNITY_DETECTOR", cast=str, default="shared_neighbors")

COMMUNITY_MATCH_THRESHOLD = get_envs("COMMUNITY_MATCH_THRESHOLD", cast=int, default=15)
COMMUNITY_MATCH_LIMIT = get_envs("COMMUNITY_MATCH_LIMIT", cast=int, default=5)
COMMUNITY_AUTO_JOIN_THRESHOLD = get_envs(
    "COMMUNITY_AUTO_JOIN_THRESHOLD", cast=int, default=50
)

SENTRY_DSN = get_envs("SENTRY_DSN", cast=str, default="")
SENTRY_ENVIRONMENT = get_envs("SENTRY_ENVIRONMENT", cast=str, default="production")
SENTRY_LOG_LEVEL = get_envs("SENTRY_LOG_LEVEL", cast=str, default="INFO")

if SENTRY_DSN:
    sentry_logging = LoggingIntegration(
        level=getattr(logging, SENTRY_LOG_LEVEL.upper(), logging.INFO),
        event_level=getattr(logging, SENTRY_LOG_LEVEL.upper(), logging.INFO),
    )

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        send_default_pii=True,
        environment=SENTRY_ENVIRONMENT,
        integrations=[sentry_logging],
        traces_sample_rate=get_envs(
            "SENTRY_TRACES_SAMPLE_RATE", cast=float, default=1.0
        ),
        profiles_sample_rate=get_envs(
            "SENTRY_PROFILES_SAMPLE_RATE", cast=float, default=1.0
        ),
    )

    root_logger = logging.getLogger()

    sentry_handler_exists = any(
        isinstance(handler, type(sentry_logging)) for handler in root_logger.handlers
    )

    if not sentry_handler_exists:
        sentry_level = getattr(logging, SENTRY_LOG_LEVEL.upper())
        root_logger.setLevel(min(root_logger.level or logging.INFO, sentry_level))
    logging.getLogger(__name__).info(
        f"Sentry logging integration configured - capturing {SENTRY_LOG_LEVEL}+ logs"
    )
