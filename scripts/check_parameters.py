"""
Check the configured FSRS weight vector.

Prints the valid range of each of the 21 weights next to the configured
value, lists validation errors, and shows which vector the scheduler will
actually use.

Usage:
    # Check FSRS_WEIGHTS from the environment / .env
    python -m scripts.check_parameters

    # Check an explicit vector
    python -m scripts.check_parameters --weights "0.212,1.2931,..."

Exit code is 1 when the vector is invalid (the scheduler would fall back
to the defaults).
"""

import argparse
import os
from typing import Optional, Sequence

from dotenv import load_dotenv

from srs_core import fsrs


def parse_weights(raw: str) -> list:
    """Split a comma-separated weight list; unparseable entries are kept as text."""
    weights = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            weights.append(float(part))
        except ValueError:
            weights.append(part)
    return weights


def display_ranges(configured: Optional[Sequence], effective: Sequence[float]) -> None:
    """Print the range table with configured and effective values."""
    print(f"{'weight':<8}{'min':>8}{'max':>8}{'configured':>14}{'effective':>12}")
    print("-" * 50)
    for index, (low, high) in enumerate(fsrs.PARAMETER_RANGES):
        if configured is not None and index < len(configured):
            shown = str(configured[index])
        else:
            shown = "-"
        print(f"w{index:<7}{low:>8}{high:>8}{shown:>14}{effective[index]:>12}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate the FSRS weight vector")
    parser.add_argument(
        "--weights",
        type=str,
        default=None,
        help="Comma-separated weights (default: FSRS_WEIGHTS)"
    )
    args = parser.parse_args(argv)

    raw = args.weights
    if raw is None:
        load_dotenv()
        raw = os.getenv("FSRS_WEIGHTS")

    print("=" * 50)
    print("FSRS Parameter Check")
    print("=" * 50)

    if not raw:
        print("No weights configured, using built-in defaults.\n")
        display_ranges(None, fsrs.DEFAULT_WEIGHTS)
        return 0

    configured = parse_weights(raw)
    result = fsrs.validate(configured)
    display_ranges(configured, fsrs.effective(configured))
    print()

    if result.valid:
        print("✓ Configured weights are valid")
        return 0

    print(f"✗ Configured weights are invalid ({len(result.errors)} problems):")
    for error in result.errors:
        print(f"  - {error}")
    print("\nThe scheduler will use the built-in defaults.")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
