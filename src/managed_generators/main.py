"""Demo entry point for managed generators."""

import logging
import sys
import time
from typing import Iterator, List, Tuple

from .config import get_generator_config
from .decorators import generator
from .handles import GeneratorHandle

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, level: str = "INFO"):
    """Configure logging level.

    Args:
        verbose: Enable verbose logging
        level: Level name used when not verbose
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(getattr(logging, level))


@generator
def make_range(low: int, high: int) -> Iterator[int]:
    """Yield the integers in [low, high)."""
    value = low
    while value < high:
        yield value
        value += 1


@generator
def guarded_range(low: int, high: int, events: List[str]) -> Iterator[int]:
    """Like make_range, but records when its resource is acquired and released."""
    events.append("acquired")
    try:
        yield from range(low, high)
    finally:
        events.append("released")


def demo_range() -> List[int]:
    """Walk a range with begin()/end() and show the post-exhaustion value."""
    gen = make_range(10, 20)
    values = []
    it = gen.begin()
    while it != GeneratorHandle.end():
        values.append(it.dereference())
        it.advance()

    logger.info(f"Range produced {values}")
    logger.info(
        f"After exhaustion: has_value={gen.has_value()} "
        f"value={gen.get_value()} done={gen.is_done()}"
    )
    return values


def demo_cancellation() -> List[str]:
    """Drop a generator mid-sequence and show that its frame unwinds."""
    events: List[str] = []
    gen = guarded_range(0, 10, events)
    weak = gen.get_weak_handle()
    for _ in range(3):
        gen.resume()
    logger.info(f"Suspended after value {gen.get_value()}; releasing last handle")
    gen.release()

    logger.info(f"Resource events: {events}; weak handle expired={weak.expired()}")
    return events


@generator
def checked_readings(readings: List[float]) -> Iterator[float]:
    """Yield readings until one is negative, then fail."""
    for reading in readings:
        if reading < 0:
            raise ValueError(f"negative reading: {reading}")
        yield reading


def demo_failure() -> Tuple[List[float], str]:
    """Consume a generator that fails part way and report where it stopped."""
    gen = checked_readings([1.5, 2.0, -1.0, 3.0])
    accepted: List[float] = []
    try:
        for reading in gen:
            accepted.append(reading)
    except ValueError as e:
        error = str(e)
    else:
        error = ""

    logger.info(f"Accepted {accepted} before failure {error!r}; resume now returns {gen.resume()}")
    return accepted, error


def print_summary(
    values: List[int],
    events: List[str],
    accepted: List[float],
    error: str,
    total_time: float,
):
    """Print summary statistics."""
    print("\n" + "=" * 80)
    print("EXECUTION SUMMARY")
    print("=" * 80)

    print("\nRange demo:")
    print(f"  Values: {values}")

    print("\nCancellation demo:")
    print(f"  Resource events: {events}")

    print("\nFailure demo:")
    print(f"  Accepted readings: {accepted}")
    print(f"  Raised: {error}")

    print(f"\nTotal time: {total_time:.2f} seconds")
    print("\n" + "=" * 80)


def main():
    """Main execution function."""
    logger.info("Starting managed generators demo")
    logger.info("=" * 80)

    try:
        generator_config = get_generator_config()
        setup_logging(level=generator_config.log_level)

        propagation = "enabled" if generator_config.failure_propagation else "disabled"
        logger.info(f"Failure propagation: {propagation}")

        start_time = time.time()
        values = demo_range()
        events = demo_cancellation()
        accepted, error = demo_failure()

        print_summary(values, events, accepted, error, time.time() - start_time)

        logger.info("\nExecution completed successfully!")
        return 0

    except KeyboardInterrupt:
        logger.warning("\nExecution interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"\nError during execution: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
