"""Collect-and-continue helpers for batch mutations."""
import logging
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

# Failures raised by single-element primitives
ELEMENT_ERRORS = (ValueError, IndexError, TypeError, OverflowError, KeyError)

DEFAULT_DELIMITER = ","


def apply_all(
    items: Iterable[T],
    operation: Callable[[T], bool],
    logger: logging.Logger
) -> bool:
    """
    Apply a single-element operation to every item.

    Every item is attempted even after a failure and nothing is rolled back.

    Args:
        items: Inputs to process in iteration order
        operation: Primitive returning False (or raising) on failure
        logger: Sink for per-element failure details

    Returns:
        True only if every item succeeded
    """
    success = True
    for item in items:
        try:
            if not operation(item):
                success = False
        except ELEMENT_ERRORS as e:
            logger.error(f"{type(e).__name__}: {e}")
            success = False
    return success


def read_source(
    expander: Callable[..., List[T]],
    source,
    logger: logging.Logger,
    *args
) -> Optional[List[T]]:
    """
    Flatten a mutator input into single elements.

    Returns None, after logging the failure, when the input itself cannot be
    read (an unsupported shape, None, an empty delimiter).
    """
    try:
        return expander(source, *args)
    except ELEMENT_ERRORS as e:
        logger.error(f"{type(e).__name__}: {e}")
        return None


def split_ids(text: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    """Split a delimiter-separated well ID list."""
    if not delimiter:
        raise ValueError("The delimiter cannot be empty.")
    return [part.strip() for part in text.split(delimiter) if part.strip()]
