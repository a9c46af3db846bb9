"""Shared fixtures: a scriptable fake image service and in-memory image sources."""

import asyncio
import io

import pytest

from frontend.errors import CollaboratorError
from frontend.model import ImageSource
from frontend.progress import ProgressSimulator


class FakeService:
    """Records every call; answers with `url`, raises `error`, or waits on `gate`."""

    def __init__(self, url="https://cdn.example.com/out.jpg", error=None):
        self.url = url
        self.error = error
        self.calls = []
        self.payloads = []
        self.gate = None

    async def _answer(self):
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.url

    async def submit(self, request):
        if request.mode == "edit":
            self.calls.append(("edit", list(request.images), request.prompt))
        else:
            self.calls.append(("generate", request.prompt, request.output_format))
        self.payloads.append(request.payload())
        return await self._answer()


def make_source(name="a.png", data=b"\x89PNG fake bytes", media_type="image/png"):
    return ImageSource(name=name, media_type=media_type, size=len(data), handle=io.BytesIO(data))


class CrashingStream:
    """Binary handle whose read() fails with something other than OSError."""

    def seekable(self):
        return False

    def read(self):
        raise RuntimeError("decoder backend crashed")


def crashing_source(name="crash.png"):
    return ImageSource(name=name, media_type="image/png", size=1, handle=CrashingStream())


def fast_progress(**kwargs):
    opts = dict(period=0.001, reset_delay=0.01)
    opts.update(kwargs)
    return ProgressSimulator(**opts)


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def failing_service():
    return FakeService(error=CollaboratorError("Failed to process image: model overloaded", status_code=500))


def run(coro):
    return asyncio.run(coro)
