"""
Pytest configuration and fixtures.

Shared fixtures write small API modules into ``tmp_path`` so handlers and the
router load real source files.
"""

import logging
import sys
import textwrap

import pytest

CALCULATOR_SOURCE = '''
import asyncio

__all__ = ["add", "divide", "slow_echo", "fail", "nested", "counter", "bump", "nothing", "VERSION"]

VERSION = "1.0"
counter = {"value": 0}


def add(a, b):
    return a + b


def divide(a, b):
    return a / b


async def slow_echo(value, delay=0.0):
    await asyncio.sleep(delay)
    return value


def fail(message):
    raise ValueError(message)


def bump():
    counter["value"] += 1
    return counter["value"]


def nothing():
    return None


class _Geometry:
    def area(self, width, height):
        return width * height


nested = {"geometry": _Geometry(), "greet": lambda name: "Hi " + name}
'''


def pytest_configure(config):
    """Configure pytest with custom settings."""
    log_level = logging.DEBUG if config.getoption("--debug-pyupi") else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("pyupi").setLevel(log_level)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--debug-pyupi",
        action="store_true",
        default=False,
        help="Enable debug logging for pyupi",
    )


@pytest.fixture
def api_dir(tmp_path):
    """A served directory holding ``calculator.py``, a ``shapes`` package and a broken module."""
    root = tmp_path / "api"
    root.mkdir()
    (root / "calculator.py").write_text(textwrap.dedent(CALCULATOR_SOURCE))
    package = root / "shapes"
    package.mkdir()
    (package / "__init__.py").write_text("def sides(name):\n    return {'triangle': 3, 'square': 4}[name]\n")
    (root / "broken.py").write_text("raise RuntimeError('module body failed')\n")
    return root


@pytest.fixture
def sibling_modules(api_dir, monkeypatch):
    """Adds ``pricing.py`` importing its sibling ``pricing_rates.py`` by name.

    ``sys.path`` and the sibling's ``sys.modules`` entry are restored afterwards.
    """
    monkeypatch.setattr(sys, "path", list(sys.path))
    monkeypatch.delitem(sys.modules, "pricing_rates", raising=False)
    (api_dir / "pricing_rates.py").write_text("RATE = 2\n\ndef apply(value):\n    return value * RATE\n")
    (api_dir / "pricing.py").write_text("import pricing_rates\n\n\ndef quad(value):\n    return pricing_rates.apply(value) * 2\n")
    yield api_dir
    sys.modules.pop("pricing_rates", None)
