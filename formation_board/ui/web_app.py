"""
Web application module for the Formation Board.

This module contains the Flask web server that exposes the formation catalog
and roster editing to a front end (pitch rendering, drag handling, photo
picking) through JSON API endpoints.
"""
import base64
import binascii
import logging
import math
import uuid
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from .. import __version__
from ..config import AppConfig, configure_logging, load_config
from ..models import Formation, PlayerEntity, preset_names, preset_offsets, is_known_preset
from ..services import FormationNameError, RosterEditor, ServiceFactory, validate_formation_name
from ..utils import APP_TITLE

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Uses the service factory so every request shares one catalog store and
    one editor per opened formation.
    """

    def __init__(self, factory: ServiceFactory):
        self.factory = factory
        self.store = factory.get_catalog_store()

    def editor_for(self, formation_id: uuid.UUID) -> Optional[RosterEditor]:
        """Open the editor of a formation, or None if it is not in the catalog."""
        formation = self.store.get(formation_id)
        if formation is None:
            return None
        return self.factory.open_editor(formation)


def _formation_data(formation: Formation) -> Dict[str, Any]:
    data = formation.to_dict()
    data["created_display"] = formation.created_display
    return data


def _player_data(player: PlayerEntity) -> Dict[str, Any]:
    data = player.to_dict()
    data["has_photo"] = player.has_photo
    return data


def _roster_data(editor: RosterEditor) -> Dict[str, Any]:
    return {
        "formation": _formation_data(editor.formation),
        "players": [_player_data(p) for p in editor.players],
        "matching_presets": editor.matching_presets(),
    }


def _json_object() -> Optional[Dict[str, Any]]:
    """Get the request body as a JSON object; a missing body counts as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _invalid_body():
    return jsonify({"success": False, "error": "Request body must be a JSON object"}), 400


def _number(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"'{label}' must be a finite number")
    return value


def create_app(factory: Optional[ServiceFactory] = None, config: Optional[AppConfig] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        factory: Service factory to use; one is built from the config if omitted
        config: Application configuration; read from the environment if omitted

    Returns:
        Configured Flask application instance
    """
    config = config or load_config()
    factory = factory or ServiceFactory(config)
    app_state = WebAppState(factory)

    app = Flask(__name__)
    app.config["APP_STATE"] = app_state

    @app.route("/")
    def index():
        """Describe the service."""
        return jsonify({"success": True, "app": APP_TITLE, "version": __version__})

    # ---------- Catalog API ---------- #

    @app.route("/api/formations", methods=["GET"])
    def get_formations():
        """Get all formations in catalog order."""
        return jsonify({
            "success": True,
            "formations": [_formation_data(f) for f in app_state.store.formations]
        })

    @app.route("/api/formations", methods=["POST"])
    def create_formation():
        """Create a formation with the default roster."""
        data = _json_object()
        if data is None:
            return _invalid_body()
        try:
            name = validate_formation_name(data.get("name"))
        except FormationNameError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        formation = app_state.store.add(name)
        return jsonify({
            "success": True,
            "formation": _formation_data(formation),
            "message": f"Formation '{name}' created successfully"
        }), 201

    @app.route("/api/formations/<uuid:formation_id>", methods=["GET"])
    def get_formation(formation_id: uuid.UUID):
        """Get a specific formation."""
        formation = app_state.store.get(formation_id)
        if formation is None:
            return jsonify({"success": False, "error": "Formation not found"}), 404
        return jsonify({"success": True, "formation": _formation_data(formation)})

    @app.route("/api/formations/<uuid:formation_id>", methods=["PUT"])
    def rename_formation(formation_id: uuid.UUID):
        """Rename a formation."""
        data = _json_object()
        if data is None:
            return _invalid_body()
        try:
            name = validate_formation_name(data.get("name"))
        except FormationNameError as e:
            return jsonify({"success": False, "error": str(e)}), 400

        if app_state.store.get(formation_id) is None:
            return jsonify({"success": False, "error": "Formation not found"}), 404
        app_state.store.rename(formation_id, name)
        return jsonify({
            "success": True,
            "formation": _formation_data(app_state.store.get(formation_id))
        })

    @app.route("/api/formations/<uuid:formation_id>", methods=["DELETE"])
    def delete_formation(formation_id: uuid.UUID):
        """Delete a formation and its roster file."""
        if not app_state.factory.remove_formation(formation_id):
            return jsonify({"success": False, "error": "Formation not found"}), 404
        return jsonify({"success": True})

    @app.route("/api/formations/delete", methods=["POST"])
    def delete_formations():
        """Delete several formations by list index."""
        data = _json_object()
        if data is None:
            return _invalid_body()
        indices = data.get("indices")
        if not isinstance(indices, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in indices
        ):
            return jsonify({"success": False, "error": "'indices' must be a list of integers"}), 400

        removed = app_state.factory.remove_formations(indices)
        return jsonify({
            "success": True,
            "removed": [_formation_data(f) for f in removed]
        })

    # ---------- Roster API ---------- #

    @app.route("/api/presets", methods=["GET"])
    def get_presets():
        """Get the preset layouts."""
        return jsonify({
            "success": True,
            "presets": [
                {
                    "name": name,
                    "positions": [
                        {"width": o.width, "height": o.height} for o in preset_offsets(name)
                    ],
                }
                for name in preset_names()
            ]
        })

    @app.route("/api/formations/<uuid:formation_id>/roster", methods=["GET"])
    def get_roster(formation_id: uuid.UUID):
        """Open a formation's roster."""
        editor = app_state.editor_for(formation_id)
        if editor is None:
            return jsonify({"success": False, "error": "Formation not found"}), 404
        return jsonify({"success": True, **_roster_data(editor)})

    @app.route("/api/formations/<uuid:formation_id>/players/<uuid:player_id>/drag", methods=["POST"])
    def drag_player(formation_id: uuid.UUID, player_id: uuid.UUID):
        """Apply a drag delta reported by the pitch view."""
        editor = app_state.editor_for(formation_id)
        if editor is None:
            return jsonify({"success": False, "error": "Formation not found"}), 404
        data = _json_object()
        if data is None:
            return _invalid_body()
        try:
            dx = _number(data.get("dx"), "dx")
            dy = _number(data.get("dy"), "dy")
            player = editor.move_by(player_id, dx, dy)
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except KeyError:
            return jsonify({"success": False, "error": "Player not found"}), 404
        return jsonify({
            "success": True,
            "player": _player_data(player),
            "matching_presets": editor.matching_presets()
        })

    @app.route("/api/formations/<uuid:formation_id>/players/<uuid:player_id>", methods=["PUT"])
    def update_player(formation_id: uuid.UUID, player_id: uuid.UUID):
        """Commit name and/or position edits for a player."""
        editor = app_state.editor_for(formation_id)
        if editor is None:
            return jsonify({"success": False, "error": "Formation not found"}), 404
        data = _json_object()
        if data is None:
            return _invalid_body()
        try:
            # Validate everything before committing either change
            if "name" in data and not isinstance(data["name"], str):
                raise ValueError("'name' must be a string")
            target = None
            if "position" in data:
                position = data["position"]
                if not isinstance(position, dict):
                    raise ValueError("'position' must be an object")
                target = (
                    _number(position.get("width"), "width"),
                    _number(position.get("height"), "height"),
                )
            editor.get(player_id)
            if target is not None:
                editor.move_to(player_id, *target)
            if "name" in data:
                editor.rename_player(player_id, data["name"])
            player = editor.get(player_id)
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except KeyError:
            return jsonify({"success": False, "error": "Player not found"}), 404
        return jsonify({"success": True, "player": _player_data(player)})

    @app.route("/api/formations/<uuid:formation_id>/players/<uuid:player_id>/photo", methods=["PUT"])
    def set_player_photo(formation_id: uuid.UUID, player_id: uuid.UUID):
        """Set or clear a player's photo from a resolved image pick."""
        editor = app_state.editor_for(formation_id)
        if editor is None:
            return jsonify({"success": False, "error": "Formation not found"}), 404
        data = _json_object()
        if data is None:
            return _invalid_body()
        raw = data.get("imageData")
        photo = None
        if raw is not None:
            try:
                photo = base64.b64decode(raw, validate=True)
            except (binascii.Error, TypeError, ValueError):
                return jsonify({"success": False, "error": "'imageData' must be base64"}), 400

        if not editor.set_photo(player_id, photo):
            # Player was replaced while the image was loading
            return jsonify({"success": False, "error": "Player not found"}), 409
        return jsonify({"success": True, "player": _player_data(editor.get(player_id))})

    @app.route("/api/formations/<uuid:formation_id>/preset", methods=["POST"])
    def apply_preset(formation_id: uuid.UUID):
        """Lay out a roster as a preset."""
        editor = app_state.editor_for(formation_id)
        if editor is None:
            return jsonify({"success": False, "error": "Formation not found"}), 404
        data = _json_object()
        if data is None:
            return _invalid_body()
        preset = data.get("preset")
        if not isinstance(preset, str) or not is_known_preset(preset):
            return jsonify({
                "success": False,
                "error": f"Invalid preset: {preset}",
                "suggestions": preset_names()
            }), 400

        editor.apply_preset(preset, keep_players=bool(data.get("keep_players", False)))
        return jsonify({"success": True, **_roster_data(editor)})

    return app


def run_web_app(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default from config: localhost only)
        port: Port number to listen on
    """
    config = load_config()
    configure_logging(config.log_level)
    factory = ServiceFactory(config)
    app = create_app(factory, config)
    try:
        app.run(host=host or config.host, port=port or config.port, debug=False)
    finally:
        factory.shutdown()


if __name__ == "__main__":
    run_web_app()
