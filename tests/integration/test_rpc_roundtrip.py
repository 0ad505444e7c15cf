"""End-to-end tests: proxy -> RemoteHandler -> router -> dispatcher and back.

The FastAPI app runs in-process behind ``httpx.ASGITransport``, so the full HTTP
envelope is exercised without opening a socket.
"""

import asyncio

import httpx
import pytest

from pyupi import upi
from pyupi.errors import ResolutionError, TransportError, UnknownMethodError
from pyupi.server import create_app


def _remote(api_dir, module_path):
    transport = httpx.ASGITransport(app=create_app(api_dir))
    return upi(f"http://api.test{module_path}", transport=transport)


@pytest.mark.asyncio
class TestRemoteRoundTrip:
    """Calls made through a remote proxy behave like local calls."""

    async def test_simple_call(self, api_dir):
        """Arguments go out and the result comes back."""
        api = _remote(api_dir, "/calculator.py")
        assert await api.add(40, 2) == 42

    async def test_nested_paths(self, api_dir):
        """Nested members resolve on the server side."""
        api = _remote(api_dir, "/calculator.py")

        assert await api.nested.greet("Ada") == "Hi Ada"
        assert await api.nested.geometry.area(2, 8) == 16

    async def test_void_result(self, api_dir):
        """A method returning None resolves to None."""
        api = _remote(api_dir, "/calculator.py")
        assert await api.nothing() is None

    async def test_remote_failure_is_reraised_locally(self, api_dir):
        """Remote exceptions are raised at the call site with kind and message."""
        api = _remote(api_dir, "/calculator.py")

        with pytest.raises(ZeroDivisionError, match="division by zero") as excinfo:
            await api.divide(1, 0)

        assert "divide" in excinfo.value.remote_traceback

    async def test_unknown_method(self, api_dir):
        """Unknown members raise UnknownMethodError listing the exports."""
        api = _remote(api_dir, "/calculator.py")

        with pytest.raises(UnknownMethodError, match="Valid = add"):
            await api.subtract(1, 2)

    async def test_unresolvable_module_is_transport_error(self, api_dir):
        """The router answers 500 for missing modules; the caller sees a transport failure."""
        api = _remote(api_dir, "/absent.py")

        with pytest.raises(TransportError) as excinfo:
            await api.anything()

        assert excinfo.value.status == 500

    async def test_concurrent_calls_complete_out_of_order(self, api_dir):
        """Concurrent calls each get their own result regardless of completion order."""
        api = _remote(api_dir, "/calculator.py")

        results = await asyncio.gather(
            api.slow_echo("slow", 0.05),
            api.slow_echo("fast", 0.0),
            api.slow_echo("medium", 0.02),
        )

        assert results == ["slow", "fast", "medium"]


@pytest.mark.asyncio
class TestLocalRoundTrip:
    """The same calls through a file URL never touch HTTP."""

    async def test_local_and_remote_agree(self, api_dir):
        """Local and remote proxies return the same values."""
        local = upi((api_dir / "calculator.py").as_uri())
        remote = _remote(api_dir, "/calculator.py")

        assert await local.add(3, 4) == await remote.add(3, 4)
        assert await local.nested.greet("Bo") == await remote.nested.greet("Bo")

    async def test_local_missing_module(self, tmp_path):
        """A missing local module raises ResolutionError directly."""
        api = upi((tmp_path / "absent.py").as_uri())

        with pytest.raises(ResolutionError):
            await api.anything()
