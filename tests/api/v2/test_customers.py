"""
Tests for the customers API endpoints (/api/v2/customers).

Customers are created through the API so every test exercises the same
validation the screens hit.
"""
import pytest
import uuid as uuid_module
from httpx import AsyncClient

from tests.factories import CustomerFactory, CompanyCustomerFactory

CUSTOMERS_PREFIX = "/api/v2/customers"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _create_customer_via_api(client: AsyncClient, **overrides) -> dict:
    payload = CustomerFactory(**overrides)
    response = await client.post(f"{CUSTOMERS_PREFIX}/", json=payload)
    assert response.status_code == 201, f"Customer creation failed: {response.text}"
    return response.json()


# ---------------------------------------------------------------------------
# POST /customers - Create
# ---------------------------------------------------------------------------


class TestCreateCustomer:
    """Tests for POST /customers."""

    @pytest.mark.asyncio
    async def test_create_customer_success(self, client: AsyncClient):
        """Creating a customer with valid data returns 201."""
        payload = CompanyCustomerFactory(customer_name="Jane Doe", rego="ABC123")
        response = await client.post(f"{CUSTOMERS_PREFIX}/", json=payload)
        assert response.status_code == 201, response.text
        data = response.json()

        assert data["customer_name"] == "Jane Doe"
        assert data["rego"] == "ABC123"
        assert data["company_name"] == payload["company_name"]
        assert data["vehicle_year"] == payload["vehicle_year"]
        assert "id" in data
        assert data["created_at"]

    @pytest.mark.asyncio
    async def test_create_customer_minimal_fields(self, client: AsyncClient):
        """Only the name and REGO are required."""
        response = await client.post(
            f"{CUSTOMERS_PREFIX}/", json={"customer_name": "Min Imal", "rego": "MIN001"}
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["email"] is None
        assert data["vehicle_year"] is None

    @pytest.mark.asyncio
    async def test_create_customer_missing_name(self, client: AsyncClient):
        """A blank name is rejected with the dialog message."""
        response = await client.post(
            f"{CUSTOMERS_PREFIX}/", json={"customer_name": "   ", "rego": "ABC123"}
        )
        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["detail"] == "Customer name is required."

    @pytest.mark.asyncio
    async def test_create_customer_missing_rego(self, client: AsyncClient):
        response = await client.post(f"{CUSTOMERS_PREFIX}/", json={"customer_name": "No Rego"})
        assert response.status_code == 422
        assert response.json()["detail"] == "Vehicle REGO is required."

    @pytest.mark.asyncio
    async def test_create_customer_blank_optional_fields_become_null(self, client: AsyncClient):
        """Untouched form inputs arrive as "" and are stored as null."""
        response = await client.post(
            f"{CUSTOMERS_PREFIX}/",
            json={
                "customer_name": "  Jane Doe  ",
                "rego": "XYZ789",
                "email": "",
                "mobile": "",
                "vehicle_year": "",
            },
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["customer_name"] == "Jane Doe"
        assert data["email"] is None
        assert data["mobile"] is None
        assert data["vehicle_year"] is None

    @pytest.mark.asyncio
    async def test_create_customer_invalid_email(self, client: AsyncClient):
        response = await client.post(
            f"{CUSTOMERS_PREFIX}/",
            json=CustomerFactory(email="not-an-email"),
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_customer_duplicate_rego(self, client: AsyncClient):
        """The same vehicle cannot be entered twice."""
        await _create_customer_via_api(client, rego="DUP001")
        response = await client.post(f"{CUSTOMERS_PREFIX}/", json=CustomerFactory(rego="DUP001"))

        assert response.status_code == 409
        data = response.json()
        assert data["title"] == "Duplicate Entry"
        assert data["detail"] == "This customer and vehicle combination already exists in the database."


# ---------------------------------------------------------------------------
# GET /customers - List
# ---------------------------------------------------------------------------


class TestListCustomers:
    """Tests for GET /customers."""

    @pytest.mark.asyncio
    async def test_list_customers_empty(self, client: AsyncClient):
        response = await client.get(f"{CUSTOMERS_PREFIX}/")
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0
        assert data["page_size"] == 10

    @pytest.mark.asyncio
    async def test_list_customers_newest_first(self, client: AsyncClient):
        first = await _create_customer_via_api(client)
        second = await _create_customer_via_api(client)

        response = await client.get(f"{CUSTOMERS_PREFIX}/")
        ids = [c["id"] for c in response.json()["items"]]
        assert ids == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_list_customers_pagination(self, client: AsyncClient):
        for _ in range(3):
            await _create_customer_via_api(client)

        response = await client.get(f"{CUSTOMERS_PREFIX}/", params={"page": 2, "page_size": 2})
        data = response.json()
        assert data["total"] == 3
        assert data["page"] == 2
        assert len(data["items"]) == 1

    @pytest.mark.asyncio
    async def test_list_customers_search(self, client: AsyncClient):
        """Search matches name, REGO, mobile, company and email."""
        await _create_customer_via_api(client, customer_name="Alice Smith", rego="AAA111")
        await _create_customer_via_api(client, customer_name="Bob Jones", rego="BBB222")

        response = await client.get(f"{CUSTOMERS_PREFIX}/", params={"search": "bbb"})
        items = response.json()["items"]
        assert [c["customer_name"] for c in items] == ["Bob Jones"]

        response = await client.get(f"{CUSTOMERS_PREFIX}/", params={"search": "alice"})
        assert response.json()["total"] == 1


# ---------------------------------------------------------------------------
# GET / PATCH / DELETE /customers/{id}
# ---------------------------------------------------------------------------


class TestCustomerById:

    @pytest.mark.asyncio
    async def test_get_customer(self, client: AsyncClient):
        created = await _create_customer_via_api(client)
        response = await client.get(f"{CUSTOMERS_PREFIX}/{created['id']}")
        assert response.status_code == 200
        assert response.json()["rego"] == created["rego"]

    @pytest.mark.asyncio
    async def test_get_customer_not_found(self, client: AsyncClient):
        response = await client.get(f"{CUSTOMERS_PREFIX}/{uuid_module.uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "RES_001"

    @pytest.mark.asyncio
    async def test_update_customer(self, client: AsyncClient):
        created = await _create_customer_via_api(client)
        response = await client.patch(
            f"{CUSTOMERS_PREFIX}/{created['id']}",
            json={"mobile": "0400111222", "vehicle_model": "FRR"},
        )
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["mobile"] == "0400111222"
        assert data["vehicle_model"] == "FRR"
        assert data["customer_name"] == created["customer_name"]

    @pytest.mark.asyncio
    async def test_update_customer_cannot_blank_rego(self, client: AsyncClient):
        created = await _create_customer_via_api(client)
        response = await client.patch(f"{CUSTOMERS_PREFIX}/{created['id']}", json={"rego": ""})
        assert response.status_code == 422
        assert response.json()["detail"] == "Vehicle REGO is required."

    @pytest.mark.asyncio
    async def test_update_customer_duplicate_rego(self, client: AsyncClient):
        await _create_customer_via_api(client, rego="TAKEN1")
        other = await _create_customer_via_api(client)

        response = await client.patch(f"{CUSTOMERS_PREFIX}/{other['id']}", json={"rego": "TAKEN1"})
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_customer(self, client: AsyncClient):
        created = await _create_customer_via_api(client)

        response = await client.delete(f"{CUSTOMERS_PREFIX}/{created['id']}")
        assert response.status_code == 204

        response = await client.get(f"{CUSTOMERS_PREFIX}/{created['id']}")
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# GET /customers/{id}/job-card-draft
# ---------------------------------------------------------------------------


class TestJobCardDraftForCustomer:

    @pytest.mark.asyncio
    async def test_draft_copies_customer_details(self, client: AsyncClient):
        created = await _create_customer_via_api(
            client, customer_name="Jane Doe", rego="DRAFT1", vehicle_year=2019
        )

        response = await client.get(f"{CUSTOMERS_PREFIX}/{created['id']}/job-card-draft")
        assert response.status_code == 200, response.text
        draft = response.json()

        assert draft["customer_name"] == "Jane Doe"
        assert draft["rego"] == "DRAFT1"
        assert draft["vehicle_year"] == "2019"
        assert draft["job_sequence"] == "001"
        assert draft["service_progress"] is None
        assert len(draft["lubricants_used"]["lubricants"]) == 10
