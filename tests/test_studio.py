"""Tests for frontend.studio: entry points the display layer calls."""

import asyncio
from io import BytesIO

import pytest
import requests
from PIL import Image

from conftest import fast_progress, run
from frontend import downloads
from frontend.downloads import result_filename
from frontend.errors import CollaboratorError
from frontend.orchestrator import SubmissionState
from frontend.studio import Studio


def png_bytes():
    buf = BytesIO()
    Image.new("RGB", (4, 4), (255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


class FakeResponse:
    def __init__(self, content, status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def studio(service):
    return Studio(service=service, progress=fast_progress())


class TestSubmitAndHistory:

    def test_submit_records_result(self, studio, service):
        result = run(studio.submit("generate", "a lighthouse"))
        assert studio.results() == [result]
        assert studio.state is SubmissionState.IDLE
        assert not studio.busy
        levels = [n.level for n in studio.drain_notices()]
        assert levels == ["info", "success"]

    def test_progress_resets_when_each_job_runs_in_its_own_loop(self, service):
        seen = []
        studio = Studio(service=service, progress=fast_progress(on_change=seen.append))

        asyncio.run(studio.submit("generate", "a cat"))
        assert studio.progress.value == 0
        assert seen[-2:] == [100, 0]

        service.error = CollaboratorError("boom")
        seen.clear()
        asyncio.run(studio.submit("generate", "a dog"))
        assert studio.progress.value == 0
        assert 100 not in seen

    def test_submit_without_settle_leaves_completed_value(self, studio):
        async def scenario():
            await studio.submit("generate", "a cat", settle=False)
            return studio.progress.value

        assert run(scenario()) == 100

    def test_drain_empties_queue(self, studio):
        run(studio.submit("generate", ""))
        assert len(studio.drain_notices()) == 1
        assert studio.drain_notices() == []

    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_clear_history(self, studio, count):
        async def scenario():
            for i in range(count):
                await studio.submit("generate", f"p{i}")

        run(scenario())
        studio.clear_history()
        assert studio.results() == []
        assert studio.drain_notices()[-1].message == "Results cleared"

    def test_on_notice_listener(self, service):
        got = []
        studio = Studio(service=service, progress=fast_progress(), on_notice=got.append)
        studio.clear_history()
        assert [n.message for n in got] == ["Results cleared"]


class TestCopyReference:

    def test_writes_to_clipboard_sink(self, service):
        copied = []
        studio = Studio(service=service, clipboard=copied.append)
        studio.copy_reference("https://cdn.example.com/x.jpg")
        assert copied == ["https://cdn.example.com/x.jpg"]
        assert studio.drain_notices()[-1].message == "Copied to clipboard!"

    def test_without_sink_still_notifies(self, studio):
        studio.copy_reference("u")
        assert studio.drain_notices()[-1].level == "success"


class TestDownload:

    def test_saves_fetched_image(self, studio, monkeypatch, tmp_path):
        data = png_bytes()
        monkeypatch.setattr(downloads.requests, "get", lambda url, timeout: FakeResponse(data))

        path = studio.download("https://cdn.example.com/x.png", result_filename(1), tmp_path)

        assert path == tmp_path / "edited-image-1.png"
        assert path.read_bytes() == data
        assert studio.drain_notices()[-1].message == "Image downloaded successfully!"

    def test_filename_cannot_escape_directory(self, studio, monkeypatch, tmp_path):
        monkeypatch.setattr(downloads.requests, "get", lambda url, timeout: FakeResponse(png_bytes()))
        path = studio.download("u", "../../evil.png", tmp_path)
        assert path == tmp_path / "evil.png"

    def test_http_error_reports_failure(self, studio, monkeypatch, tmp_path):
        monkeypatch.setattr(downloads.requests, "get", lambda url, timeout: FakeResponse(b"", 404))
        assert studio.download("u", "a.png", tmp_path) is None
        assert studio.drain_notices()[-1].message == "Failed to download image"

    def test_non_image_body_reports_failure(self, studio, monkeypatch, tmp_path):
        monkeypatch.setattr(downloads.requests, "get", lambda url, timeout: FakeResponse(b"<html>"))
        assert studio.download("u", "a.png", tmp_path) is None
        assert list(tmp_path.iterdir()) == []
