"""
Tests for the Flask JSON API.

Exercises the catalog and roster endpoints end to end against a temporary
data directory.
"""
import base64
import tempfile
import unittest
import uuid
from pathlib import Path

from formation_board.config import AppConfig
from formation_board.services import ServiceFactory
from formation_board.ui.web_app import create_app
from formation_board.utils import PLACEHOLDER_NAME, ROSTER_SIZE


class TestWebApp(unittest.TestCase):
    """Test cases for the web API."""

    def setUp(self) -> None:
        """Create an app over a temporary data directory."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.temp_dir.name)
        config = AppConfig(data_dir=self.data_dir)
        self.factory = ServiceFactory(config)
        self.app = create_app(self.factory, config)
        self.client = self.app.test_client()

    def tearDown(self) -> None:
        """Flush saves and remove the temporary directory."""
        self.factory.shutdown()
        self.temp_dir.cleanup()

    def _create(self, name: str = "Saturday XI") -> dict:
        response = self.client.post("/api/formations", json={"name": name})
        self.assertEqual(response.status_code, 201)
        return response.get_json()["formation"]

    def _roster(self, formation_id: str) -> dict:
        response = self.client.get(f"/api/formations/{formation_id}/roster")
        self.assertEqual(response.status_code, 200)
        return response.get_json()

    def test_index(self) -> None:
        """Test the service description."""
        data = self.client.get("/").get_json()
        self.assertTrue(data["success"])
        self.assertEqual(data["app"], "Formation Board")

    def test_create_and_list(self) -> None:
        """Test created formations are listed in order with display dates."""
        a = self._create("A")
        b = self._create("B")

        data = self.client.get("/api/formations").get_json()

        self.assertEqual([f["id"] for f in data["formations"]], [a["id"], b["id"]])
        self.assertIn("created_display", data["formations"][0])
        self.assertTrue((self.data_dir / a["filename"]).exists())

    def test_create_rejects_blank_name(self) -> None:
        """Test empty and whitespace-only names are rejected."""
        for payload in ({"name": ""}, {"name": "   "}, {}, None):
            with self.subTest(payload=payload):
                response = self.client.post("/api/formations", json=payload)
                self.assertEqual(response.status_code, 400)
                self.assertFalse(response.get_json()["success"])
        self.assertEqual(self.client.get("/api/formations").get_json()["formations"], [])

    def test_non_object_body_is_rejected(self) -> None:
        """Test JSON arrays and scalars are refused with 400 on every write endpoint."""
        formation = self._create()
        player = self._roster(formation["id"])["players"][0]
        base = f"/api/formations/{formation['id']}"
        player_url = f"{base}/players/{player['id']}"
        calls = [
            (self.client.post, "/api/formations"),
            (self.client.put, base),
            (self.client.post, "/api/formations/delete"),
            (self.client.post, f"{player_url}/drag"),
            (self.client.put, player_url),
            (self.client.put, f"{player_url}/photo"),
            (self.client.post, f"{base}/preset"),
        ]
        for body in (["x"], "name", 3):
            for send, url in calls:
                with self.subTest(url=url, body=body):
                    response = send(url, json=body)
                    self.assertEqual(response.status_code, 400)
                    self.assertFalse(response.get_json()["success"])

        self.assertEqual(len(self.client.get("/api/formations").get_json()["formations"]), 1)

    def test_rename(self) -> None:
        """Test renaming, blank rejection and unknown ids."""
        formation = self._create("Old")

        response = self.client.put(f"/api/formations/{formation['id']}", json={"name": "New"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["formation"]["name"], "New")

        response = self.client.put(f"/api/formations/{formation['id']}", json={"name": " "})
        self.assertEqual(response.status_code, 400)

        response = self.client.put(f"/api/formations/{uuid.uuid4()}", json={"name": "X"})
        self.assertEqual(response.status_code, 404)

        names = [f["name"] for f in self.client.get("/api/formations").get_json()["formations"]]
        self.assertEqual(names, ["New"])

    def test_delete_by_id(self) -> None:
        """Test deleting one formation removes its roster file."""
        formation = self._create()

        response = self.client.delete(f"/api/formations/{formation['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertFalse((self.data_dir / formation["filename"]).exists())

        response = self.client.delete(f"/api/formations/{formation['id']}")
        self.assertEqual(response.status_code, 404)

    def test_delete_by_indices(self) -> None:
        """Test deleting several formations by list index."""
        a, b, c = self._create("A"), self._create("B"), self._create("C")

        response = self.client.post("/api/formations/delete", json={"indices": [0, 2]})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([f["id"] for f in response.get_json()["removed"]], [a["id"], c["id"]])

        remaining = self.client.get("/api/formations").get_json()["formations"]
        self.assertEqual([f["id"] for f in remaining], [b["id"]])

        response = self.client.post("/api/formations/delete", json={"indices": "0"})
        self.assertEqual(response.status_code, 400)

    def test_delete_after_edit_leaves_no_roster_file(self) -> None:
        """Test a queued roster save cannot recreate a deleted roster file."""
        formation = self._create()
        player = self._roster(formation["id"])["players"][0]
        self.client.post(
            f"/api/formations/{formation['id']}/players/{player['id']}/drag",
            json={"dx": 1, "dy": 1}
        )

        self.client.delete(f"/api/formations/{formation['id']}")
        self.factory.get_background_saver().flush(timeout=5)

        self.assertFalse((self.data_dir / formation["filename"]).exists())

    def test_get_roster(self) -> None:
        """Test opening a new formation shows the default roster."""
        formation = self._create()

        data = self._roster(formation["id"])

        self.assertEqual(len(data["players"]), ROSTER_SIZE)
        self.assertEqual(data["matching_presets"], ["default"])
        self.assertTrue(all(p["name"] == PLACEHOLDER_NAME for p in data["players"]))
        self.assertEqual(
            self.client.get(f"/api/formations/{uuid.uuid4()}/roster").status_code, 404
        )

    def test_drag(self) -> None:
        """Test drag deltas move a player and update preset highlighting."""
        formation = self._create()
        player = self._roster(formation["id"])["players"][0]
        url = f"/api/formations/{formation['id']}/players/{player['id']}/drag"

        data = self.client.post(url, json={"dx": 5, "dy": -5}).get_json()
        self.assertEqual(data["player"]["positionWidth"], 5)
        self.assertEqual(data["player"]["positionHeight"], 245)
        self.assertEqual(data["matching_presets"], ["default"])

        data = self.client.post(url, json={"dx": 5, "dy": 0}).get_json()
        self.assertEqual(data["matching_presets"], [])

        self.assertEqual(self.client.post(url, json={"dx": "a", "dy": 0}).status_code, 400)
        missing = f"/api/formations/{formation['id']}/players/{uuid.uuid4()}/drag"
        self.assertEqual(self.client.post(missing, json={"dx": 1, "dy": 1}).status_code, 404)

    def test_update_player(self) -> None:
        """Test committing a name and an absolute position."""
        formation = self._create()
        player = self._roster(formation["id"])["players"][3]
        url = f"/api/formations/{formation['id']}/players/{player['id']}"

        response = self.client.put(url, json={
            "name": "Sato", "position": {"width": -10, "height": 20.5}
        })

        self.assertEqual(response.status_code, 200)
        data = response.get_json()["player"]
        self.assertEqual(data["name"], "Sato")
        self.assertEqual((data["positionWidth"], data["positionHeight"]), (-10, 20.5))

        self.factory.get_background_saver().flush(timeout=5)
        saved = self.factory.get_roster_codec().load(formation["filename"])
        self.assertEqual(saved[3].name, "Sato")

    def test_update_player_rejects_bad_name_without_moving(self) -> None:
        """Test an invalid name leaves a valid position in the same request unapplied."""
        formation = self._create()
        player = self._roster(formation["id"])["players"][0]
        url = f"/api/formations/{formation['id']}/players/{player['id']}"

        response = self.client.put(url, json={"name": 5, "position": {"width": 99, "height": 99}})

        self.assertEqual(response.status_code, 400)
        unchanged = self._roster(formation["id"])["players"][0]
        self.assertEqual((unchanged["positionWidth"], unchanged["positionHeight"]), (0, 250))
        self.assertEqual(unchanged["name"], PLACEHOLDER_NAME)

    def test_photo(self) -> None:
        """Test setting, rejecting and clearing a player photo."""
        formation = self._create()
        player = self._roster(formation["id"])["players"][1]
        url = f"/api/formations/{formation['id']}/players/{player['id']}/photo"
        encoded = base64.b64encode(b"\x89PNG\r\n").decode("ascii")

        data = self.client.put(url, json={"imageData": encoded}).get_json()
        self.assertTrue(data["player"]["has_photo"])
        self.assertEqual(data["player"]["imageData"], encoded)

        self.assertEqual(self.client.put(url, json={"imageData": "%%%"}).status_code, 400)

        data = self.client.put(url, json={"imageData": None}).get_json()
        self.assertFalse(data["player"]["has_photo"])

    def test_stale_photo_after_preset(self) -> None:
        """Test a photo for a replaced player is refused."""
        formation = self._create()
        player = self._roster(formation["id"])["players"][1]
        self.client.post(f"/api/formations/{formation['id']}/preset", json={"preset": "4-4-2"})

        response = self.client.put(
            f"/api/formations/{formation['id']}/players/{player['id']}/photo",
            json={"imageData": base64.b64encode(b"late").decode("ascii")}
        )
        self.assertEqual(response.status_code, 409)

    def test_apply_preset(self) -> None:
        """Test applying presets, with and without keeping players."""
        formation = self._create()
        url = f"/api/formations/{formation['id']}/preset"
        before = self._roster(formation["id"])["players"]

        data = self.client.post(url, json={"preset": "4-3-3"}).get_json()
        self.assertEqual(data["matching_presets"], ["4-3-3"])
        self.assertNotEqual(data["players"][0]["id"], before[0]["id"])

        kept = self.client.post(url, json={"preset": "3-5-2", "keep_players": True}).get_json()
        self.assertEqual([p["id"] for p in kept["players"]], [p["id"] for p in data["players"]])
        self.assertEqual(kept["matching_presets"], ["3-5-2"])

        response = self.client.post(url, json={"preset": "1-1-8"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("4-4-2", response.get_json()["suggestions"])

    def test_presets(self) -> None:
        """Test listing preset layouts."""
        data = self.client.get("/api/presets").get_json()
        names = [p["name"] for p in data["presets"]]
        self.assertEqual(names, ["default", "4-4-2", "4-3-3", "3-5-2", "4-2-3-1"])
        self.assertTrue(all(len(p["positions"]) == ROSTER_SIZE for p in data["presets"]))


if __name__ == "__main__":
    unittest.main()
