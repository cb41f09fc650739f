"""Tests for calculation import endpoints."""

import pytest

EXPORT = [
    {
        "ClaimID": "2024/12/ 001 ",
        "Calculation": {
            "FinalCalc": {
                "GrandTotal": {"TaxPC": {"Val": "23"}},
                "FCLabor": {"Tot": "246", "LaborRates": {"LaborResults": {"HrNo": "2"}}},
            },
            "SpareParts": {
                "PartDtls": {
                    "PartDtl": [
                        {"PartDesc": "Błotnik", "PartNo": "B-1", "Price": "400", "RepTyp": "E"},
                        {"PartDesc": "Uszczelka", "PartNo": "U-2", "Price": "0"},
                    ]
                }
            },
        },
    }
]


async def test_import(async_client):
    response = await async_client.post("/api/calculations/import", json=EXPORT)

    assert response.status_code == 200
    data = response.json()
    assert data["claim_number"] == "2024/12/ 001"
    assert data["invoice_number"] == "AUDATEX/2024/12/001"
    labour = next(i for i in data["items"] if i["uom"] == "h")
    assert labour["qty"] == 2
    assert labour["unit_net"] == 123
    assert "Uszczelka" not in [i["name"] for i in data["items"]]
    assert data["totals"]["net"] == 646.0


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ([], "Nieprawidłowy format danych kalkulacji"),
        ({"ClaimID": "X"}, "Brak sekcji Calculation w danych"),
    ],
)
async def test_import_errors_carry_user_message(async_client, payload, message):
    response = await async_client.post("/api/calculations/import", json=payload)

    assert response.status_code == 422
    assert response.json()["message"] == message


async def test_apply(async_client, sample_draft_data):
    response = await async_client.post(
        "/api/calculations/apply",
        json={"payload": EXPORT, "draft": sample_draft_data},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["imported_items"] == 2
    assert data["draft"]["buyer"] == sample_draft_data["buyer"]
    assert [i["name"] for i in data["draft"]["items"]] == ["Robocizna", "Błotnik"]
    assert data["draft"]["claim_number"] == "2024/12/ 001"
    assert data["draft"]["invoice_number"] == "FV/2024/12/001"


async def test_apply_requires_payload(async_client):
    response = await async_client.post("/api/calculations/apply", json={"draft": {}})

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "payload"
