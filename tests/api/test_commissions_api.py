import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from resellerhub.schemas.commission import CommissionCreate
from resellerhub.crud import crud_commission
from tests.conftest import create_order_row

pytestmark = pytest.mark.api


@pytest.fixture
def sold_commission(db_session: Session, reseller_token_headers: tuple, test_customer, test_package):
    _, seller = reseller_token_headers
    order = create_order_row(db_session, customer=test_customer, package=test_package, reseller=seller)
    return crud_commission.create_commission(
        db=db_session,
        obj_in=CommissionCreate(
            order_id=order.id, reseller_id=seller.id, percent=10, amount=100_000,
        ),
    )


def test_seller_reads_own_commissions(client: TestClient, reseller_token_headers: tuple, sold_commission):
    headers, seller = reseller_token_headers
    response = client.get("/api/v1/commissions/mine", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == sold_commission.id
    assert data[0]["reseller_id"] == seller.id
    assert data[0]["order"]["id"] == sold_commission.order_id
    assert data[0]["status"] == "pending"


def test_other_seller_sees_nothing(client: TestClient, sub_agent_token_headers: tuple, sold_commission):
    headers, _ = sub_agent_token_headers
    response = client.get("/api/v1/commissions/mine", headers=headers)
    assert response.status_code == 200
    assert response.json() == []


def test_customer_has_no_commissions_endpoint(client: TestClient, customer_token_headers: tuple):
    headers, _ = customer_token_headers
    assert client.get("/api/v1/commissions/mine", headers=headers).status_code == 403


def test_admin_lists_commissions(client: TestClient, admin_token_headers: tuple, sold_commission):
    headers, _ = admin_token_headers
    response = client.get("/api/v1/commissions/?status=pending", headers=headers)
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [sold_commission.id]

    response = client.get("/api/v1/commissions/?status=paid", headers=headers)
    assert response.json() == []


def test_admin_approves_then_pays(client: TestClient, admin_token_headers: tuple, sold_commission):
    headers, _ = admin_token_headers
    url = f"/api/v1/commissions/{sold_commission.id}/status"

    approved = client.patch(url, json={"status": "approved"}, headers=headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["paid_at"] is None

    paid = client.patch(url, json={"status": "paid", "expected_status": "approved"}, headers=headers)
    assert paid.status_code == 200
    assert paid.json()["status"] == "paid"
    assert paid.json()["paid_at"] is not None

    again = client.patch(url, json={"status": "approved"}, headers=headers)
    assert again.status_code == 409
    assert again.json()["error"] == "InvalidTransitionError"


def test_cannot_skip_approval(client: TestClient, admin_token_headers: tuple, sold_commission):
    headers, _ = admin_token_headers
    response = client.patch(f"/api/v1/commissions/{sold_commission.id}/status", json={"status": "paid"}, headers=headers)
    assert response.status_code == 409


def test_seller_cannot_approve_own_commission(client: TestClient, reseller_token_headers: tuple, sold_commission):
    headers, _ = reseller_token_headers
    response = client.patch(
        f"/api/v1/commissions/{sold_commission.id}/status", json={"status": "approved"}, headers=headers
    )
    assert response.status_code == 403


def test_unknown_commission(client: TestClient, admin_token_headers: tuple):
    headers, _ = admin_token_headers
    response = client.patch("/api/v1/commissions/999/status", json={"status": "approved"}, headers=headers)
    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundError"


def test_reconcile_endpoint(client: TestClient, admin_token_headers: tuple, test_reseller, test_customer, test_package, db_session: Session):
    headers, _ = admin_token_headers
    order = create_order_row(db_session, customer=test_customer, package=test_package, reseller=test_reseller)

    response = client.post("/api/v1/commissions/reconcile", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert [c["order_id"] for c in data["created"]] == [order.id]
    assert data["failed"] == []

    second = client.post("/api/v1/commissions/reconcile", headers=headers).json()
    assert second == {"created": [], "failed": []}
