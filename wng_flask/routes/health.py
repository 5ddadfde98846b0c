"""Lightweight health probe endpoint.

Exposes /healthz returning a fast 200 with the effective runtime config.
"""
from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from wng_flask import config as app_config
from wng_flask.utils.logging import get_logger

LOG = get_logger("wng.health")

bp = Blueprint("wng_health", __name__)


@bp.route("/healthz", methods=["GET"])  # simple, cache-friendly
def healthz():
    payload = {"status": "ok", **app_config.metadata(), "config": app_config.summarize_runtime_config()}
    return jsonify(payload), 200


def register_health(app: Any) -> None:
    if getattr(app, "_wng_health_bp", None):  # idempotent
        return
    app.register_blueprint(bp)  # type: ignore[attr-defined]
    setattr(app, "_wng_health_bp", bp)
    LOG.debug("health blueprint registered")


__all__ = ["register_health"]
