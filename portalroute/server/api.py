"""Flask API surface for exposing the region router."""

from __future__ import annotations

import os

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import BadRequest

from portalroute.costs import DEFAULT_COST
from portalroute.exits import ExitProvider, GraphExits, load_exit_graph
from portalroute.plan import plan, serialize_route
from portalroute.search.astar import ClosingMode, NoRouteError, SearchOptions

MAP_ENV_VAR = "PORTALROUTE_MAP"


def _parse_room(payload: object, label: str) -> str:
    """Validate that payload looks like a room name string."""
    if not isinstance(payload, str) or not payload:
        msg = f"{label} must be a room name string."
        raise BadRequest(msg)
    return payload


def _parse_goals(payload: object) -> list[str]:
    if not isinstance(payload, list) or not payload:
        msg = "goals must be a non-empty array of room names."
        raise BadRequest(msg)

    return [_parse_room(item, f"goals[{index}]") for index, item in enumerate(payload)]


def _parse_costs(payload: object) -> dict[str, int]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        msg = "costs must be an object mapping room names to integers."
        raise BadRequest(msg)
    return payload


def _parse_options(payload: dict[str, object]) -> SearchOptions:
    max_expansions = payload.get("max_expansions")
    if max_expansions is not None and (
        isinstance(max_expansions, bool) or not isinstance(max_expansions, int)
    ):
        msg = "max_expansions must be an integer."
        raise BadRequest(msg)
    closing = payload.get("closing")
    if closing is not None and not isinstance(closing, str):
        msg = "closing must be a string."
        raise BadRequest(msg)
    return SearchOptions(
        closing=ClosingMode.from_value(closing),
        max_expansions=max_expansions,
        accept_origin_goal=bool(payload.get("accept_origin_goal", False)),
    )


def create_app(exits: ExitProvider | None = None) -> Flask:
    """Build the routing app over `exits` (or the configured map file)."""
    app = Flask(__name__)
    if exits is None:
        exits = GraphExits(load_exit_graph(os.environ.get(MAP_ENV_VAR)))
    app.config["EXITS"] = exits

    @app.after_request
    def _inject_cors(response: Response) -> Response:
        """Allow simple cross-origin requests from the browser frontend."""
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
        response.headers.setdefault("Access-Control-Allow-Headers", "Content-Type")
        response.headers.setdefault("Access-Control-Allow-Methods", "POST, OPTIONS")
        return response

    @app.route("/api/route", methods=["POST", "OPTIONS"])
    def route_finder() -> Response | tuple[Response, int]:
        """Find a route from the origin room to one of the goal rooms."""
        if request.method == "OPTIONS":
            return Response("", status=204)

        raw_payload = request.get_json(silent=True)
        if raw_payload is None:
            payload: dict[str, object] = {}
        elif isinstance(raw_payload, dict):
            payload = raw_payload
        else:
            msg = "Request body must be a JSON object."
            raise BadRequest(msg)

        origin = _parse_room(payload.get("origin"), "origin")
        goals = _parse_goals(payload.get("goals"))
        costs = _parse_costs(payload.get("costs"))
        default_cost = payload.get("default_cost", DEFAULT_COST)

        try:
            options = _parse_options(payload)
            result = plan(
                origin,
                goals,
                costs,
                default_cost=default_cost,  # type: ignore[arg-type]
                exits=app.config["EXITS"],
                options=options,
            )
        except NoRouteError as exc:
            body = {"error": "no route found", "stats": exc.stats.as_dict()}
            return jsonify(body), 404
        except (TypeError, ValueError) as exc:
            raise BadRequest(str(exc)) from exc

        return jsonify(serialize_route(result))

    return app


if __name__ == "__main__":  # pragma: no cover
    create_app().run()
