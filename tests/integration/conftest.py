from http import HTTPStatus

import pytest
from flask import request
from http_server_mock import HttpServerMock

BASE_URL = "http://localhost:5000"

app = HttpServerMock(__name__)


@app.get("/hello")
def hello():
    return "Hello World", HTTPStatus.OK


@app.route("/echo", methods=["GET", "POST"])
def echo():
    """Reflect what the server received."""
    return {
        "method": request.method,
        "args": request.args.to_dict(),
        "form": request.form.to_dict(),
        "headers": {"b": request.headers.get("b"), "content-type": request.headers.get("Content-Type")},
    }, HTTPStatus.OK


@app.get("/redirect")
def redirect():
    return "", HTTPStatus.FOUND, {"Location": "/hello_world"}


@app.get("/location-only")
def location_only():
    return "", HTTPStatus.OK, {"Location": "/hello_world"}


@app.get("/hello_world")
def hello_world():
    return "Redirect target", HTTPStatus.OK


@app.get("/page")
def page():
    return '<div class="content"><span id="test">Hello World</span></div>', HTTPStatus.OK


@app.get("/missing")
def missing():
    return "Not here", HTTPStatus.NOT_FOUND


@pytest.fixture(scope="module")
def server():
    with app.run("localhost", 5000):
        yield BASE_URL
