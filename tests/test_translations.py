"""
Translation endpoint tests
"""
import pytest
from httpx import AsyncClient


class TestTranslationsAuth:

    async def test_requires_token(self, client: AsyncClient):
        response = await client.get("/translations/en")
        assert response.status_code == 401

    async def test_rejects_unknown_token(self, client: AsyncClient):
        response = await client.get("/translations/en", headers={"TB_TOKEN": "nope"})
        assert response.status_code == 401


class TestTranslationLookup:

    @pytest.mark.parametrize("language,to_do_label", [
        ("en", "To Do"),
        ("es", "Por Hacer"),
        ("fr", "À Faire"),
        ("de", "Zu Erledigen"),
    ])
    async def test_seeded_languages(self, client: AsyncClient, auth_headers, language, to_do_label):
        response = await client.get(f"/translations/{language}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["translations"]["tasks"]["statuses"]["TO_DO"] == to_do_label

    async def test_status_descriptions_included(self, client: AsyncClient, auth_headers):
        response = await client.get("/translations/en", headers=auth_headers)

        descriptions = response.json()["translations"]["tasks"]["statusDescriptions"]
        assert descriptions["ICEBOX"] == "Tasks that are deprioritized or on hold"

    async def test_unsupported_language(self, client: AsyncClient, auth_headers):
        response = await client.get("/translations/it", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Translations not found for language: it"

    @pytest.mark.parametrize("language", ["eng", "EN", "e1", "en%0A"])
    async def test_malformed_language_code(self, client: AsyncClient, auth_headers, language):
        response = await client.get(f"/translations/{language}", headers=auth_headers)
        assert response.status_code == 400

    async def test_available_languages(self, client: AsyncClient, auth_headers):
        response = await client.get("/translations", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"languages": ["de", "en", "es", "fr"]}
