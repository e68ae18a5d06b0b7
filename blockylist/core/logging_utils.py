import logging

# Global project logger (can be tuned via logging_config)
logger = logging.getLogger("blockylist")


def log_section(title: str) -> None:
    """
    Log a top-level section header.
    """
    logger.info("")  # blank line for readability
    logger.info("=== %s ===", title)


def log_info(message: str) -> None:
    logger.info("%s", message)


def log_step(message: str) -> None:
    """
    Action step / ongoing work.
    """
    logger.info("→ %s", message)


def log_success(message: str) -> None:
    logger.info("✅ %s", message)


def log_warning(message: str) -> None:
    """
    Non-fatal problem: a skipped block, a signal that contributed nothing.
    """
    logger.warning("⚠️ %s", message)


def log_error(message: str, exc_info: bool = False) -> None:
    """
    Error / fatal problem. Pass exc_info=True from an except block to keep
    the traceback.
    """
    logger.error("❌ %s", message, exc_info=exc_info)


def log_progress(
    current: int,
    total: int,
    prefix: str = "",
) -> None:
    """
    Simple progress logging.

    Example:
      log_progress(2, 5, prefix="Blocks")
      -> "Blocks 2/5 (40.0%)"
    """
    if total <= 0:
        total = 1

    fraction = max(0.0, min(1.0, current / total))
    percent = fraction * 100

    if prefix:
        logger.info("%s %d/%d (%.1f%%)", prefix, current, total, percent)
    else:
        logger.info("%d/%d (%.1f%%)", current, total, percent)
