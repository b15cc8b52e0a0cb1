#!/usr/bin/env python3
"""Run formatters, linters and the test suite in one pass.

Order: Black, isort, Ruff, Pylint, pytest. Output of every step is printed,
followed by a summary; the exit code is non-zero if any step failed.
"""

from pathlib import Path
import subprocess
import sys

PACKAGES = ["app", "core", "infrastructure", "main.py"]

CHECKS: list[tuple[list[str], str]] = [
    ([sys.executable, "-m", "black", ".", "--check"], "Black format check"),
    ([sys.executable, "-m", "isort", ".", "--check-only"], "isort import order"),
    ([sys.executable, "-m", "ruff", "check", "."], "Ruff"),
    ([sys.executable, "-m", "pylint", *PACKAGES], "Pylint"),
    ([sys.executable, "-m", "pytest", "-q"], "pytest"),
]


def run_command(cmd: list[str], description: str) -> tuple[bool, str]:
    """Run `cmd` from the project root; return (succeeded, combined output)."""
    print(f"\n{'=' * 60}\n{description}: {' '.join(cmd)}\n{'=' * 60}")
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, check=False, cwd=Path(__file__).parent
        )
    except OSError as e:
        print(f"could not start: {e}")
        return False, str(e)

    output = result.stdout + result.stderr
    print("ok" if result.returncode == 0 else "FAILED")
    if output.strip():
        print(output)
    return result.returncode == 0, output


def main() -> None:
    results = [(description, *run_command(cmd, description)) for cmd, description in CHECKS]

    print(f"\n{'=' * 60}\nSummary\n{'=' * 60}")
    for description, success, _ in results:
        print(f"{description}: {'passed' if success else 'FAILED'}")

    sys.exit(0 if all(success for _, success, _ in results) else 1)


if __name__ == "__main__":
    main()
