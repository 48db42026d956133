"""Shared pytest hooks: tests marked `slow` need a real git binary and run only with --runslow."""

import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--runslow",
        action="store_true",
        help="also run tests that create and drive a real git repository",
    )


def pytest_runtest_setup(item: pytest.Item) -> None:
    if item.get_closest_marker("slow") and not item.config.getoption("--runslow"):
        pytest.skip("drives a real git repository; pass --runslow to run it")
