"""
Tests for API layer.

Tests:
- API service methods
- HTTP endpoints and error mapping
- Tally endpoints
"""

import pytest
from fastapi.testclient import TestClient

from pinfall.api.app import create_app
from pinfall.api.schemas import (
    CreateGameRequest,
    ErrorCode,
    ErrorResponse,
    GameStatusValue,
    PinActionValue,
    ThrowRequest,
)
from pinfall.api.service import APIService
from pinfall.config import Settings
from pinfall.engine_core import InvalidState

from .conftest import GUTTER_FRAMES_1_TO_9, PERFECT_GAME


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    def test_create_game(self, service):
        """New games start empty and ready for a full rack."""
        response = service.create_game(CreateGameRequest(player_name="Test Player"))

        assert response.game_id
        assert response.player_name == "Test Player"
        assert response.status == GameStatusValue.ACTIVE
        assert response.next_pin_action == PinActionValue.RESET_ALL
        assert response.cumulative_scores == [None] * 10
        assert response.position.frame_index == 1

    def test_record_throw(self, service):
        """Recording a throw returns the updated scoreboard."""
        game = service.create_game(CreateGameRequest())
        response = service.record_throw(game.game_id, ThrowRequest(pins_down=7))

        assert response.throws == [7]
        assert response.next_pin_action == PinActionValue.REMOVE_FALLEN
        assert response.instruction == "Remove fallen pins"
        assert response.frames[0].marks == ["7"]
        assert response.frames[0].cumulative_score is None

    def test_get_nonexistent_game(self, service):
        """Getting a missing game returns an error."""
        response = service.get_scoreboard("nonexistent-id")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.GAME_NOT_FOUND

    def test_engine_errors_propagate(self, service):
        """InvalidState reaches the caller."""
        game = service.create_game(CreateGameRequest())
        for pins in [0] * 20:
            service.record_throw(game.game_id, ThrowRequest(pins_down=pins))
        with pytest.raises(InvalidState):
            service.record_throw(game.game_id, ThrowRequest(pins_down=0))

    def test_frames_view(self, service):
        """Frames carry throws, marks and cumulative scores."""
        game = service.create_game(CreateGameRequest())
        for pins in [10, 9, 1, 5]:
            service.record_throw(game.game_id, ThrowRequest(pins_down=pins))

        response = service.get_scoreboard(game.game_id)
        assert [f.throws for f in response.frames] == [[10], [9, 1], [5]]
        assert [f.marks for f in response.frames] == [["X"], ["9", "/"], ["5"]]
        assert [f.cumulative_score for f in response.frames] == [20, 35, None]
        assert response.total_score == 35

    def test_tally(self, service):
        """Finished games feed the tally; reset clears it."""
        game = service.create_game(CreateGameRequest())
        for pins in PERFECT_GAME:
            service.record_throw(game.game_id, ThrowRequest(pins_down=pins))

        assert service.get_tally().total == 300
        assert service.reset_tally().games_played == 0

    def test_end_game(self, service):
        """Ended games disappear."""
        game = service.create_game(CreateGameRequest())
        assert service.end_game(game.game_id)
        assert isinstance(service.get_scoreboard(game.game_id), ErrorResponse)
        assert game.game_id not in service.list_games()


class TestHTTPEndpoints:
    """Tests for the FastAPI app."""

    @pytest.fixture
    def app(self):
        return create_app(service=APIService(), settings=Settings())

    @pytest.fixture
    def client(self, app):
        with TestClient(app) as client:
            yield client

    @pytest.fixture
    def game_id(self, client):
        response = client.post("/api/v1/games", json={"player_name": "Ann"})
        assert response.status_code == 201
        return response.json()["game_id"]

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_create_without_body(self, client):
        """Player name defaults when no body is sent."""
        response = client.post("/api/v1/games")
        assert response.status_code == 201
        assert response.json()["player_name"] == "Player"

    def test_throw_flow(self, client, game_id):
        """Throws update the scoreboard and the pin action."""
        response = client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 7})
        assert response.status_code == 200
        data = response.json()
        assert data["next_pin_action"] == "remove_fallen"
        assert data["frames"][0]["marks"] == ["7"]

        data = client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 3}).json()
        assert data["next_pin_action"] == "reset_all"
        assert data["frames"][0]["marks"] == ["7", "/"]

    def test_out_of_range(self, client, game_id):
        """Pin counts above 10 are rejected with OUT_OF_RANGE_THROW."""
        response = client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 11})
        assert response.status_code == 422
        assert response.json()["error_code"] == "OUT_OF_RANGE_THROW"

        board = client.get(f"/api/v1/games/{game_id}").json()
        assert board["throws"] == []

    def test_throw_after_game_over(self, client, game_id):
        """A throw after the tenth frame is a conflict."""
        for pins in GUTTER_FRAMES_1_TO_9 + [4, 5]:
            client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": pins})

        board = client.get(f"/api/v1/games/{game_id}").json()
        assert board["is_game_over"] is True
        assert board["next_pin_action"] == "none"
        assert board["total_score"] == 9

        response = client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 1})
        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE"

    def test_missing_pins_down(self, client, game_id):
        """Malformed bodies get VALIDATION_ERROR."""
        response = client.post(f"/api/v1/games/{game_id}/throws", json={})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_unknown_game(self, client):
        """Unknown games are 404 GAME_NOT_FOUND."""
        response = client.get("/api/v1/games/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "GAME_NOT_FOUND"

        response = client.post("/api/v1/games/missing/throws", json={"pins_down": 3})
        assert response.status_code == 404

    def test_reset_game(self, client, game_id):
        """Reset empties the history in place."""
        client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 10})
        response = client.post(f"/api/v1/games/{game_id}/reset")
        assert response.status_code == 200
        assert response.json()["throws"] == []

    def test_list_and_end(self, client, game_id):
        """Games are listed until ended."""
        assert game_id in client.get("/api/v1/games").json()["games"]

        response = client.delete(f"/api/v1/games/{game_id}")
        assert response.json() == {"success": True, "game_id": game_id}
        assert game_id not in client.get("/api/v1/games").json()["games"]

    def test_tally_endpoints(self, client, game_id):
        """Tally reflects finished games until reset."""
        for pins in PERFECT_GAME:
            client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": pins})

        tally = client.get("/api/v1/tally").json()
        assert tally["total"] == 300
        assert tally["games_played"] == 1

        tally = client.delete("/api/v1/tally").json()
        assert tally["total"] == 0

    def test_cleanup(self, client, game_id):
        """Cleanup keeps active games."""
        response = client.post("/api/v1/maintenance/cleanup", params={"max_age": 0})
        assert response.status_code == 200
        assert response.json()["count"] == 0

    def test_websocket_initial_scoreboard(self, client, game_id):
        """WebSocket sends the scoreboard on connect and answers pings."""
        with client.websocket_connect(f"/api/v1/games/{game_id}/ws") as ws:
            message = ws.receive_json()
            assert message["type"] == "scoreboard"
            assert message["payload"]["game_id"] == game_id

            ws.send_text('{"type": "ping"}')
            assert ws.receive_json() == {"type": "pong"}

    @pytest.mark.parametrize("pins", [True, "5", 2.5])
    def test_non_integer_pins_rejected(self, client, game_id, pins):
        """Booleans, strings and floats are not pin counts."""
        response = client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": pins})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

        board = client.get(f"/api/v1/games/{game_id}").json()
        assert board["throws"] == []

    def test_websocket_pushes_throws_and_game_over(self, client, game_id):
        """Every accepted throw is pushed; the last one is followed by game_over."""
        with client.websocket_connect(f"/api/v1/games/{game_id}/ws") as ws:
            assert ws.receive_json()["type"] == "scoreboard"

            client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 7})
            message = ws.receive_json()
            assert message["type"] == "scoreboard"
            assert message["payload"]["throws"] == [7]

            for pins in [2] + [0] * 16 + [4, 5]:
                client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": pins})
                assert ws.receive_json()["type"] == "scoreboard"

            message = ws.receive_json()
            assert message == {"type": "game_over", "payload": {"total_score": 18}}

            client.post(f"/api/v1/games/{game_id}/reset")
            message = ws.receive_json()
            assert message["type"] == "scoreboard"
            assert message["payload"]["throws"] == []

    def test_rejected_throw_not_pushed(self, client, game_id):
        """Only accepted throws reach WebSocket clients."""
        with client.websocket_connect(f"/api/v1/games/{game_id}/ws") as ws:
            ws.receive_json()

            client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 11})
            client.post(f"/api/v1/games/{game_id}/throws", json={"pins_down": 3})
            assert ws.receive_json()["payload"]["throws"] == [3]

    def test_end_game_drops_connections(self, app, client, game_id):
        """Ending a game forgets its WebSocket list."""
        with client.websocket_connect(f"/api/v1/games/{game_id}/ws") as ws:
            ws.receive_json()
            assert game_id in app.state.ws_connections

            client.delete(f"/api/v1/games/{game_id}")
            assert game_id not in app.state.ws_connections

    def test_disconnect_prunes_empty_list(self, app, client, game_id):
        """Closing the last WebSocket of a game removes its entry."""
        with client.websocket_connect(f"/api/v1/games/{game_id}/ws") as ws:
            ws.receive_json()
        client.get("/api/v1/health")
        assert game_id not in app.state.ws_connections
