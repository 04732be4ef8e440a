"""Tests for the governance HTTP surface."""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.dao_cooperative.exceptions import GatewayError
from src.dao_cooperative.router import router

from .conftest import ALICE, BOB


@pytest.fixture
def api(client):
    app = FastAPI()
    app.include_router(router)
    client.session.update(identity=ALICE)
    app.state.governance_client = client
    return TestClient(app)


class TestGovernanceRoutes:
    """Test that routes call the client and return outcome plus state."""

    def test_state_snapshot(self, api):
        response = api.get("/governance/state")

        assert response.status_code == 200
        assert response.json()["identity"] == ALICE
        assert response.json()["error"] is None

    def test_register_member(self, api, gateway):
        response = api.post("/governance/members", json={"address": BOB})

        assert response.status_code == 200
        assert response.json()["outcome"]["ok"] is True
        gateway.register_member.assert_awaited_once_with(ALICE, BOB)

    def test_rejection_is_reported_in_body(self, api, gateway):
        gateway.vote_on_proposal.side_effect = GatewayError("Already voted", 400)

        response = api.post("/governance/proposals/3/vote", json={"option_index": 1})

        body = response.json()
        assert response.status_code == 200
        assert body["outcome"]["ok"] is False
        assert body["state"]["error"] == "Already voted"

    def test_vote_without_option_is_local_error(self, api, gateway):
        response = api.post("/governance/proposals/3/vote", json={})

        assert response.json()["state"]["error"] == "Please enter an option index"
        gateway.vote_on_proposal.assert_not_awaited()

    def test_create_proposal(self, api, gateway):
        response = api.post(
            "/governance/proposals",
            json={"description": "Lunch", "voting_duration_minutes": 30, "options": ["Pizza", "Sushi"]},
        )

        assert response.json()["outcome"]["ok"] is True
        gateway.create_proposal.assert_awaited_once_with(ALICE, "Lunch", 30, ["Pizza", "Sushi", "", "", ""])
        assert response.json()["state"]["active_proposals"] == ["1", "2"]

    def test_close_voting(self, api, gateway):
        response = api.post("/governance/proposals/1/close")

        assert response.json()["outcome"]["ok"] is True
        gateway.close_voting.assert_awaited_once_with(ALICE, "1")

    def test_details_and_results(self, api):
        details = api.get("/governance/proposals/1/details").json()
        results = api.get("/governance/proposals/1/results").json()

        assert details["state"]["proposal_details"]["total_votes"] == 4
        assert results["state"]["proposal_results"] == {
            "voting_closed": True,
            "winning_option_index": 0,
            "vote_counts": [3, 1, 0],
        }

    def test_listing_routes(self, api):
        assert api.get("/governance/proposals/active").json()["state"]["active_proposals"] == ["1", "2"]
        assert api.get("/governance/proposals/closed").json()["state"]["closed_proposals"] == ["0"]
        assert api.get("/governance/members/count").json()["state"]["total_members"] == 3

    def test_reload_returns_three_outcomes(self, api):
        body = api.post("/governance/reload").json()

        assert [o["operation"] for o in body["outcomes"]] == [
            "load_active_proposals",
            "load_closed_proposals",
            "load_total_members",
        ]

    def test_missing_client_is_503(self):
        app = FastAPI()
        app.include_router(router)
        app.state.governance_client = None

        response = TestClient(app).get("/governance/state")
        assert response.status_code == 503
