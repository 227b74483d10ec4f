# SPDX-License-Identifier: AGPL-3.0-or-later
"""JSON API of the :py:obj:`EngineRegistry
<searchengines.registry.EngineRegistry>` for a settings UI or a search
dispatcher running in another process.

To start the server (``server.bind_address`` and ``server.port``)::

    $ python -m searchengines run

Endpoints:

``GET /engines``
  Ordered list of the engines, ``[{"short_name": .., "enabled": .., "default": ..}, ..]``

``GET /engines/enabled``
  Short names of the enabled engines (in order).

``GET /engines/default``, ``POST /engines/default``
  Get / set the default engine, the request body is ``{"short_name": ".."}``

``POST /engines/order``
  Set the order of the engines, the request body is a list of short names.

``POST /engines/<short_name>/enable``, ``POST /engines/<short_name>/disable``
  Enable / disable an engine.

``GET /search?q=..&engine=..``
  Redirect to the search URL of the engine (default engine if ``engine`` is not
  set).

``GET /health``
  Liveness check, answers ``OK`` (text/plain).

HTTP errors (400, 404, 405, ..) are answered with a JSON object
``{"error": .., "message": ..}``.
"""

from __future__ import annotations

__all__ = ["create_app"]

import typing

import flask
import msgspec
from werkzeug.exceptions import HTTPException

from searchengines import logger
from searchengines.exceptions import InvalidOrderError, UnknownEngineError, PersistenceError

if typing.TYPE_CHECKING:
    from searchengines.registry import EngineRegistry

log = logger.getChild("webapp")


class EngineState(msgspec.Struct, kw_only=True):
    """Data type of an engine in the responses of the JSON API."""

    short_name: str
    enabled: bool
    default: bool
    description: str = ""


class ErrorMessage(msgspec.Struct, kw_only=True):
    error: str
    message: str


class DefaultEngine(msgspec.Struct, kw_only=True):
    short_name: str


def json_response(obj: typing.Any, status: int = 200) -> flask.Response:
    return flask.Response(
        msgspec.json.encode(obj).decode("utf-8"),
        status=status,
        mimetype="application/json",
    )


def error_response(exc: Exception, status: int) -> flask.Response:
    return json_response(ErrorMessage(error=type(exc).__name__, message=str(exc)), status=status)


def create_app(registry: EngineRegistry) -> flask.Flask:
    """Build the flask application serving the JSON API of ``registry``."""

    app = flask.Flask("searchengines")

    @app.errorhandler(UnknownEngineError)
    def unknown_engine(exc: UnknownEngineError):
        log.warning("request %s: %s", flask.request.path, exc)
        return error_response(exc, 404)

    @app.errorhandler(InvalidOrderError)
    def invalid_order(exc: InvalidOrderError):
        log.warning("request %s: %s", flask.request.path, exc)
        return error_response(exc, 400)

    @app.errorhandler(msgspec.DecodeError)
    @app.errorhandler(msgspec.ValidationError)
    def invalid_request(exc: msgspec.MsgspecError):
        log.warning("request %s: invalid body: %s", flask.request.path, exc)
        return error_response(exc, 400)

    @app.errorhandler(HTTPException)
    def http_error(exc: HTTPException):
        log.warning("request %s: %s", flask.request.path, exc)
        return json_response(
            ErrorMessage(error=type(exc).__name__, message=exc.description or ""),
            status=exc.code or 500,
        )

    @app.errorhandler(PersistenceError)
    def persistence_error(exc: PersistenceError):
        log.error("request %s: %s", flask.request.path, exc)
        return error_response(exc, 500)

    def engine_state(eng) -> EngineState:
        return EngineState(
            short_name=eng.short_name,
            enabled=registry.is_engine_enabled(eng),
            default=registry.is_engine_default(eng),
            description=eng.description,
        )

    @app.route("/health", methods=["GET"])
    def health():
        return flask.Response("OK", mimetype="text/plain")

    @app.route("/engines", methods=["GET"])
    def engines():
        return json_response([engine_state(eng) for eng in registry.get_ordered_engines()])

    @app.route("/engines/enabled", methods=["GET"])
    def enabled_engines():
        return json_response([eng.short_name for eng in registry.get_enabled_engines()])

    @app.route("/engines/default", methods=["GET"])
    def get_default_engine():
        return json_response(engine_state(registry.get_default_engine()))

    @app.route("/engines/default", methods=["POST"])
    def set_default_engine():
        data = msgspec.json.decode(flask.request.get_data(), type=DefaultEngine)
        registry.set_default_engine(data.short_name)
        return json_response(engine_state(registry.get_default_engine()))

    @app.route("/engines/order", methods=["POST"])
    def set_order():
        names = msgspec.json.decode(flask.request.get_data(), type=list[str])
        registry.set_ordered_engines(names)
        return json_response([engine_state(eng) for eng in registry.get_ordered_engines()])

    @app.route("/engines/<string:short_name>/enable", methods=["POST"])
    def enable_engine(short_name: str):
        registry.enable_engine(short_name)
        return json_response(engine_state(registry.get_engine(short_name)))

    @app.route("/engines/<string:short_name>/disable", methods=["POST"])
    def disable_engine(short_name: str):
        registry.disable_engine(short_name)
        return json_response(engine_state(registry.get_engine(short_name)))

    @app.route("/search", methods=["GET"])
    def search():
        query = flask.request.args.get("q", "").strip()
        if not query:
            flask.abort(400, "missing query parameter 'q'")

        short_name = flask.request.args.get("engine")
        eng = registry.get_default_engine()
        if short_name:
            eng = registry.get_engine(short_name)
            if not registry.is_engine_enabled(eng):
                flask.abort(400, f"engine {short_name} is disabled")

        return flask.redirect(eng.search_url_for(query))

    return app
