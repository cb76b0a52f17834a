"""
Tests for the Response sink.
"""

from http import HTTPStatus

import pytest

from routechain import Response, ResponseAlreadyFinished


class TestResponse:
    """Test Response mutation and body helpers."""

    def test_defaults(self):
        response = Response()
        assert response.status_code == 200
        assert response.headers == {}
        assert response.body == b""
        assert not response.finished

    def test_status_enum_is_stored_as_int(self):
        response = Response(HTTPStatus.CREATED)
        assert response.status_code == 201
        assert type(response.status_code) is int

    def test_incremental_writes(self):
        response = Response()
        response.write("héllo ").write(b"world")
        assert response.body == "héllo world".encode("utf-8")
        assert not response.finished

        response.end("!")
        assert response.finished
        assert response.body.endswith(b"!")

    def test_write_rejects_other_types(self):
        with pytest.raises(TypeError):
            Response().write(42)

    def test_headers_are_lowercased(self):
        response = Response(headers={"X-One": "1"})
        response.set_header("Content-Type", "text/csv")
        assert response.headers == {"x-one": "1", "content-type": "text/csv"}
        assert response.get_header("CONTENT-TYPE") == "text/csv"

    def test_text(self):
        response = Response()
        response.text("hello", status_code=201)
        assert response.status_code == 201
        assert response.headers["content-type"] == "text/plain; charset=utf-8"
        assert response.body == b"hello"
        assert response.finished

    def test_html(self):
        response = Response()
        response.html("<h1>hi</h1>")
        assert response.headers["content-type"] == "text/html; charset=utf-8"

    def test_json(self):
        response = Response()
        response.json({"name": "José", "n": 1})
        assert response.headers["content-type"] == "application/json; charset=utf-8"
        assert response.body == '{"name": "José", "n": 1}'.encode("utf-8")

    def test_explicit_content_type_wins(self):
        response = Response()
        response.set_header("content-type", "application/problem+json")
        response.json({"title": "bad"})
        assert response.headers["content-type"] == "application/problem+json"

    def test_redirect(self):
        response = Response()
        response.redirect("/login")
        assert response.status_code == 307
        assert response.headers["location"] == "/login"
        assert response.body == b""

    def test_finished_response_is_immutable(self):
        response = Response()
        response.text("done")

        with pytest.raises(ResponseAlreadyFinished):
            response.write("more")
        with pytest.raises(ResponseAlreadyFinished):
            response.set_status(500)
        with pytest.raises(ResponseAlreadyFinished):
            response.set_header("x", "y")
        with pytest.raises(ResponseAlreadyFinished):
            response.end()
        with pytest.raises(ResponseAlreadyFinished):
            response.reset()

    def test_reset(self):
        response = Response()
        response.set_status(418).set_header("x-a", "b").write("partial")
        response.reset()
        assert response.status_code == 200
        assert response.headers == {}
        assert response.body == b""

    def test_reset_keeps_given_headers(self):
        response = Response()
        response.set_header("x-frame-options", "DENY").set_header("content-type", "text/plain")
        response.set_status(418).write("partial")
        response.reset({"X-Frame-Options": "DENY", "Content-Type": "text/plain"})
        assert response.status_code == 200
        assert response.headers == {"x-frame-options": "DENY"}
        assert response.body == b""

    def test_to_asgi_messages(self):
        response = Response()
        response.set_header("X-Custom", "yes")
        response.text("hi", status_code=HTTPStatus.ACCEPTED)

        start, body = response.to_asgi_messages()
        assert start["type"] == "http.response.start"
        assert start["status"] == 202
        assert (b"x-custom", b"yes") in start["headers"]
        assert (b"content-length", b"2") in start["headers"]
        assert body == {"type": "http.response.body", "body": b"hi", "more_body": False}

    def test_repr(self):
        response = Response()
        assert repr(response) == "<Response 200 open>"
        response.end()
        assert repr(response) == "<Response 200 finished>"
