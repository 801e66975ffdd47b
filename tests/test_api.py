"""Tests for the wizard HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from sii_offerte.main import app


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestValidateEndpoint:
    def test_full_record(self, client, valid_offer):
        response = client.post("/api/validate", json={"record": valid_offer})
        assert response.status_code == 200
        body = response.json()
        assert body["scope"] == {"kind": "full"}
        assert body["fields"]["Identification.vatNumber"]["status"] == "OK"

    def test_single_section(self, client):
        response = client.post("/api/validate", json={"record": {}, "section": "Identification"})
        assert response.status_code == 200
        body = response.json()
        assert set(body["sections"]) == {"Identification"}
        assert body["fields"]["Identification.vatNumber"]["status"] == "MISSING"
        assert body["fields"]["Identification.vatNumber"]["message"] == "Campo obbligatorio"

    def test_unknown_section(self, client):
        response = client.post("/api/validate", json={"record": {}, "section": "Nowhere"})
        assert response.status_code == 404


class TestStepsEndpoints:
    def test_list_steps(self, client):
        response = client.get("/api/steps")
        assert response.status_code == 200
        steps = response.json()
        assert len(steps) == 18
        assert steps[0] == {"step_id": 1, "title": "Identificativi Offerta", "sections": ["Identification"]}

    def test_advance_blocked(self, client):
        response = client.post("/api/steps/1/advance", json={"record": {}})
        assert response.status_code == 200
        body = response.json()
        assert body["allowed"] is False
        assert len(body["blocking_errors"]) == 2

    def test_advance_allowed(self, client, valid_offer):
        response = client.post("/api/steps/18/advance", json={"record": valid_offer})
        assert response.json() == {"allowed": True, "blocking_errors": [], "warnings": []}

    def test_advance_unknown_step(self, client):
        response = client.post("/api/steps/99/advance", json={"record": {}})
        assert response.status_code == 404

    def test_progress(self, client, valid_offer):
        response = client.post("/api/steps/progress", json={"record": valid_offer})
        assert response.status_code == 200
        assert all(step["complete"] for step in response.json())


class TestExportEndpoint:
    def test_download(self, client, valid_offer):
        response = client.post("/api/export", json={"record": valid_offer, "description": "Luce fissa"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert response.headers["content-disposition"] == (
            'attachment; filename="IT12345678901_INSERIMENTO_LUCE_FISSA.XML"'
        )
        assert response.text.startswith('<?xml version="1.0" encoding="UTF-8"?>')

    def test_blocked(self, client, valid_offer):
        del valid_offer["PaymentMethods"]
        response = client.post("/api/export", json={"record": valid_offer})
        assert response.status_code == 422
        errors = response.json()["blocking_errors"]
        assert errors[0]["field_id"] == "PaymentMethods"
        assert errors[0]["status"] == "MISSING"
