import logging
from typing import Optional

logger = logging.getLogger("spotify_top")


def log_info(message: str) -> None:
    logger.info("%s", message)


def log_step(message: str) -> None:
    """
    Outbound call or ongoing work.
    """
    logger.info("→ %s", message)


def log_success(message: str) -> None:
    logger.info("✅ %s", message)


def log_warning(message: str) -> None:
    logger.warning("⚠️ %s", message)


def log_error(message: str) -> None:
    logger.error("❌ %s", message)


def log_suppressed(context: str, exc: BaseException) -> None:
    """
    Report a failure that is deliberately not surfaced to the caller.

    Best-effort paths (cache reads/writes, logout) funnel every swallowed
    exception through here so they stay visible in the logs.
    """
    logger.warning(
        "⚠️ %s failed (%s: %s)",
        context,
        type(exc).__name__,
        exc,
        exc_info=logger.isEnabledFor(logging.DEBUG),
    )


def mask_token(token: Optional[str], visible: int = 8) -> str:
    """
    Shorten a credential for log output.

    Example:
      mask_token("BQDx1234567890abcdef") -> "BQDx1234…"
    """
    if not token:
        return "<empty>"
    if len(token) <= visible:
        return "…"
    return f"{token[:visible]}…"
