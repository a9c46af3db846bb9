"""Tests for frontend.service_client: request bodies and error mapping, using httpx.MockTransport."""

import json

import httpx
import pytest

from conftest import run
from frontend.errors import CollaboratorError, EmptyPromptError
from frontend.job_request import build
from frontend.model import JobRequest
from frontend.service_client import EDIT_PATH, GENERATE_PATH, ImageServiceClient


def client_for(handler):
    return ImageServiceClient(base_url="http://service.test/", transport=httpx.MockTransport(handler))


def ok(url="https://replicate.delivery/out.jpg"):
    return httpx.Response(200, json={"success": True, "output": url, "message": "Image processed successfully"})


class TestRequests:

    def test_edit_posts_prompt_and_image_list(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return ok()

        url = run(client_for(handler).edit(["data:image/png;base64,AA"], "make it pop"))

        assert url == "https://replicate.delivery/out.jpg"
        assert seen["path"] == EDIT_PATH
        assert seen["body"] == {"prompt": "make it pop", "image": ["data:image/png;base64,AA"]}

    def test_generate_posts_output_format(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return ok()

        run(client_for(handler).generate("a cat"))

        assert seen["path"] == GENERATE_PATH
        assert seen["body"] == {"prompt": "a cat", "output_format": "jpg"}

    @pytest.mark.parametrize("mode,images,path", [
        ("edit", ["data:image/png;base64,AA", "data:image/jpeg;base64,BB"], EDIT_PATH),
        ("generate", [], GENERATE_PATH),
    ])
    def test_submit_posts_exactly_the_built_payload(self, mode, images, path):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return ok()

        request = build(mode, "  merge them  ", images)
        run(client_for(handler).submit(request))

        assert seen["path"] == path
        assert seen["body"] == request.payload()

    def test_convenience_calls_validate_before_sending(self):
        def handler(request):
            raise AssertionError("nothing should be sent")

        with pytest.raises(EmptyPromptError):
            run(client_for(handler).generate("   "))


class TestErrors:

    def test_non_success_status_carries_details(self):
        def handler(request):
            return httpx.Response(500, json={
                "error": "Failed to process image",
                "details": "NSFW content detected",
                "success": False,
            })

        with pytest.raises(CollaboratorError) as exc:
            run(client_for(handler).generate("x"))
        assert exc.value.status_code == 500
        assert "NSFW content detected" in str(exc.value)

    def test_bad_request_uses_error_field(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Prompt is required"})

        with pytest.raises(CollaboratorError, match="Prompt is required"):
            run(client_for(handler).submit(JobRequest(mode="generate", prompt="", output_format="jpg")))

    def test_success_false_is_an_error(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "quota exceeded"})

        with pytest.raises(CollaboratorError, match="quota exceeded"):
            run(client_for(handler).generate("x"))

    def test_missing_output_is_an_error(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "message": "done"})

        with pytest.raises(CollaboratorError, match="no output"):
            run(client_for(handler).edit(["data:image/png;base64,AA"], "x"))

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(CollaboratorError, match="malformed"):
            run(client_for(handler).generate("x"))

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(CollaboratorError, match="Could not reach"):
            run(client_for(handler).generate("x"))
