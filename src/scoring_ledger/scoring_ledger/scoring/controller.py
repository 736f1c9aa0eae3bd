from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import ConfigurationError, NotFoundError, StorageError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _error(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    @app.route("/api/scoring/calculate", methods=["POST"], endpoint="api_scoring_calculate")
    def api_scoring_calculate():
        payload = request.get_json(silent=True) or {}
        try:
            result = container.scoring_service.calculate_score(
                payload.get("studentId"),
                payload.get("type"),
                payload.get("week"),
                payload.get("data") or {},
            )
        except (ValidationError, ConfigurationError) as e:
            return _error(str(e), 400)
        except NotFoundError as e:
            return _error(str(e), 404)
        except StorageError:
            logger.exception("Scoring failed for payload %s", payload)
            return _error("Error calculating score", 500)
        return jsonify(result.to_dict())

    @app.route("/api/scoring/history/last", methods=["POST"], endpoint="api_scoring_last_history")
    def api_scoring_last_history():
        payload = request.get_json(silent=True) or {}
        try:
            entry = container.scoring_service.last_history(
                payload.get("studentId"),
                payload.get("type"),
                payload.get("week"),
            )
        except ValidationError as e:
            return _error(str(e), 400)
        except StorageError:
            logger.exception("History lookup failed for payload %s", payload)
            return _error("Error getting history", 500)

        if entry is None:
            return jsonify({"success": True, "found": False, "history": None})
        return jsonify({"success": True, "found": True, "history": entry.to_dict()})

    @app.route("/api/scoring/history", methods=["POST"], endpoint="api_scoring_history")
    def api_scoring_history():
        payload = request.get_json(silent=True) or {}
        try:
            entries = container.scoring_service.history(
                payload.get("studentId"),
                payload.get("type"),
                payload.get("limit"),
            )
        except ValidationError as e:
            return _error(str(e), 400)
        except StorageError:
            logger.exception("History listing failed for payload %s", payload)
            return _error("Error getting history", 500)
        return jsonify({"success": True, "history": [e.to_dict() for e in entries]})

    @app.route("/api/scoring/conditions", methods=["GET"], endpoint="api_scoring_conditions")
    def api_scoring_conditions():
        try:
            conditions = container.condition_service.list_conditions()
        except ConfigurationError as e:
            return _error(str(e), 400)
        except StorageError:
            logger.exception("Loading scoring conditions failed")
            return _error("Error loading scoring conditions", 500)
        return jsonify({"success": True, "conditions": [c.to_document() for c in conditions]})
