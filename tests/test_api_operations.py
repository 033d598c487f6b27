from __future__ import annotations

from typing import Any

import httpx
import pytest

from apps.api.main import app


async def _post(path: str, payload: Any) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        return await client.post(path, json=payload)


@pytest.mark.anyio
async def test_format_complete_phone() -> None:
    response = await _post("/v1/format", {"mask": "preset:phone_us", "raw": "5551234567"})

    assert response.status_code == 200
    assert response.json() == {
        "display": "(555) 123-4567",
        "cursor_position": 14,
        "complete": True,
    }


@pytest.mark.anyio
async def test_format_partial_phone_by_focus() -> None:
    focused = await _post("/v1/format", {"mask": "(000) 000-0000", "raw": "555"})
    unfocused = await _post(
        "/v1/format", {"mask": "(000) 000-0000", "raw": "555", "focused": False}
    )

    assert focused.json()["display"] == "(555) ___-____"
    assert focused.json()["cursor_position"] == 6
    assert focused.json()["complete"] is False
    assert unfocused.json()["display"] == "(555) "


@pytest.mark.anyio
async def test_format_custom_prompt_char() -> None:
    response = await _post("/v1/format", {"mask": "000-00-0000", "raw": "1", "prompt_char": "#"})

    assert response.json()["display"] == "1##-##-####"


@pytest.mark.anyio
async def test_unformat_display_text() -> None:
    response = await _post("/v1/unformat", {"mask": "preset:ssn", "display": "123-45-6789"})

    assert response.status_code == 200
    assert response.json() == {"raw": "123456789"}


@pytest.mark.anyio
async def test_complete_reports_capacity_and_keyboard() -> None:
    response = await _post("/v1/complete", {"mask": "preset:zip_us", "raw": "12345"})

    assert response.json() == {"complete": True, "capacity": 9, "keyboard": "numeric"}


@pytest.mark.anyio
async def test_complete_for_empty_mask_has_no_capacity() -> None:
    response = await _post("/v1/complete", {"mask": "", "raw": ""})

    assert response.json() == {"complete": False, "capacity": None, "keyboard": "default"}


@pytest.mark.anyio
async def test_project_insert_and_strip() -> None:
    inserted = await _post("/v1/project", {"mask": "preset:ssn", "value": "123456789"})
    stripped = await _post(
        "/v1/project", {"mask": "preset:ssn", "value": "123-45-6789", "strip": True}
    )

    assert inserted.json() == {"value": "123-45-6789"}
    assert stripped.json() == {"value": "123456789"}


@pytest.mark.anyio
async def test_mobile_input_single_char_append() -> None:
    response = await _post(
        "/v1/mobile-input",
        {
            "mask": "(000) 000-0000",
            "old_display": "(555) ___-____",
            "new_display": "6",
            "expected_display": "(555) ___-____",
            "current_raw": "555",
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "raw": "5556",
        "display": "(555) 6__-____",
        "cursor_position": 7,
        "rule": "single_char",
        "changed": True,
    }


@pytest.mark.anyio
async def test_mobile_input_echo_is_unchanged() -> None:
    response = await _post(
        "/v1/mobile-input",
        {
            "mask": "(000) 000-0000",
            "old_display": "(5__) ___-____",
            "new_display": "(5__) ___-____",
            "expected_display": "(5__) ___-____",
            "current_raw": "5",
        },
    )

    assert response.json()["rule"] == "echo"
    assert response.json()["changed"] is False


@pytest.mark.anyio
async def test_invalid_json_body_returns_400() -> None:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.post(
            "/v1/format",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_JSON"


@pytest.mark.anyio
async def test_non_object_body_returns_400() -> None:
    response = await _post("/v1/format", ["mask", "raw"])

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_ARGUMENT"
    assert response.json()["message"] == "request body must be a JSON object"


@pytest.mark.anyio
async def test_missing_field_lists_validation_errors() -> None:
    response = await _post("/v1/unformat", {"mask": "000"})

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "INVALID_ARGUMENT"
    assert body["detail"]["errors"][0]["loc"] == ["display"]


@pytest.mark.anyio
async def test_unknown_body_field_is_rejected() -> None:
    response = await _post("/v1/format", {"mask": "000", "raw": "1", "extra": True})

    assert response.status_code == 400
    assert response.json()["detail"]["errors"][0]["loc"] == ["extra"]


@pytest.mark.anyio
async def test_long_prompt_char_is_rejected() -> None:
    response = await _post("/v1/format", {"mask": "000", "raw": "1", "prompt_char": "__"})

    assert response.status_code == 400
    assert response.json()["detail"]["errors"][0]["loc"] == ["prompt_char"]


@pytest.mark.anyio
async def test_unknown_preset_returns_400() -> None:
    response = await _post("/v1/format", {"mask": "preset:nope", "raw": "1"})

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "INVALID_ARGUMENT"
    assert body["message"] == "Unknown mask preset: nope"
    assert body["detail"]["field"] == "mask"
