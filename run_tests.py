#!/usr/bin/env python3
"""
Test runner script for the Calendar client tests.

This script provides convenient commands to run different test suites.
"""

import subprocess
import sys
from pathlib import Path


def run_command(cmd: list) -> int:
    """Run a command and return the exit code."""
    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def main():
    """Main test runner function."""
    if len(sys.argv) < 2:
        print("""
Usage: python run_tests.py <command>

Available commands:
  all                  - Run all tests
  unit                 - Run only unit tests
  integration          - Run only integration tests
  calendar             - Run event, calendar and calendar list tests
  oauth                - Run authorization and token exchange tests
  async                - Run async tests
  sync                 - Run non-async tests
  coverage             - Run tests with coverage report
  calendar-unit        - Run Calendar unit tests
  calendar-integration - Run Calendar integration tests

Examples:
  python run_tests.py unit
  python run_tests.py oauth
  python run_tests.py coverage
        """)
        return 1

    command = sys.argv[1].lower()

    # Base pytest command
    base_cmd = [sys.executable, "-m", "pytest"]

    commands = {
        "all": [],
        "unit": ["-m", "unit"],
        "integration": ["-m", "integration"],
        "calendar": ["-m", "calendar"],
        "oauth": ["-m", "oauth"],
        "async": ["-m", "asyncio"],
        "sync": ["-m", "not asyncio"],
        "coverage": ["--cov=src/gcal_client", "--cov-report=html", "--cov-report=term-missing"],
        "calendar-unit": ["-m", "unit and calendar"],
        "calendar-integration": ["-m", "integration and calendar"],
    }
    if command not in commands:
        print(f"Unknown command: {command}")
        return 1

    return run_command(base_cmd + commands[command])


if __name__ == "__main__":
    sys.exit(main())
