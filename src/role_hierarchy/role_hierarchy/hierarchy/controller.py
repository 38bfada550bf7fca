from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.exceptions import AuthorizationError, ValidationError


def register(app: Flask, container: Container) -> None:
    def current_policies() -> frozenset:
        return frozenset(session.get("policies") or ())

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"message": "Authentication required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def error_response(e: Exception, status: int):
        return jsonify({"message": str(e)}), status

    @app.route("/api/roles", methods=["GET"], endpoint="roles_list")
    @login_required
    def roles_list():
        try:
            roles = container.workflow_service.list_roles(current_policies=current_policies())
        except AuthorizationError as e:
            return error_response(e, 403)
        except Exception:
            app.logger.exception("Get roles error")
            return jsonify({"message": "Failed to get roles"}), 500

        return jsonify([r.to_dict() for r in roles])

    @app.route("/api/roles/workflow", methods=["GET"], endpoint="roles_workflow_get")
    @login_required
    def roles_workflow_get():
        try:
            saved = container.workflow_service.get_saved(current_policies=current_policies())
        except AuthorizationError as e:
            return error_response(e, 403)
        except Exception:
            app.logger.exception("Get workflow error")
            return jsonify({"message": "Failed to get workflow"}), 500

        if saved is None:
            return jsonify({"roles": [], "connections": []})
        return jsonify(saved.to_dict())

    @app.route("/api/roles/workflow", methods=["POST"], endpoint="roles_workflow_save")
    @login_required
    def roles_workflow_save():
        payload = request.get_json(silent=True)

        try:
            saved = container.workflow_service.save_workflow(
                current_policies=current_policies(),
                payload=payload if payload is not None else {},
            )
        except AuthorizationError as e:
            return error_response(e, 403)
        except ValidationError as e:
            return error_response(e, 400)
        except Exception:
            app.logger.exception("Save workflow error")
            return jsonify({"message": "Failed to save workflow"}), 500

        return jsonify(saved.to_dict())
