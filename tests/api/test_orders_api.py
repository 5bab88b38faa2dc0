import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from resellerhub.crud import crud_commission, crud_order
from resellerhub.models.order import PaymentStatus
from resellerhub.models.user import UserRole
from tests.conftest import create_order_row, create_package, create_user

pytestmark = pytest.mark.api


def _order_payload(customer, package, **extra):
    payload = {"customer_id": customer.id, "package_id": package.id, "payment_method": "cash"}
    payload.update(extra)
    return payload


# --- Order Creation (POST /orders/) ---
def test_reseller_creates_order_with_commission(
    client: TestClient, reseller_token_headers: tuple, test_customer, db_session: Session
):
    headers, reseller = reseller_token_headers
    package = create_package(db_session, duration=1, price=1_000_000)

    response = client.post("/api/v1/orders/", json=_order_payload(test_customer, package), headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["reseller_id"] == reseller.id
    assert data["amount"] == 1_000_000
    assert data["payment_status"] == "pending"
    assert data["payment_method"] == "cash"
    assert data["customer"]["id"] == test_customer.id
    assert data["package"]["id"] == package.id
    assert data["commission"]["percent"] == 10
    assert data["commission"]["amount"] == 100_000
    assert data["commission"]["status"] == "pending"
    assert data["expiry_date"] > data["activation_date"]


def test_sub_agent_cannot_sell_for_another_seller(
    client: TestClient, sub_agent_token_headers: tuple, test_reseller, test_customer, test_package
):
    headers, _ = sub_agent_token_headers
    response = client.post(
        "/api/v1/orders/", json=_order_payload(test_customer, test_package, reseller_id=test_reseller.id), headers=headers
    )
    assert response.status_code == 403
    assert response.json()["error"] == "AuthorizationError"


def test_customer_cannot_create_order(client: TestClient, customer_token_headers: tuple, test_package):
    headers, customer = customer_token_headers
    response = client.post("/api/v1/orders/", json=_order_payload(customer, test_package), headers=headers)
    assert response.status_code == 403


def test_create_order_requires_login(client: TestClient, test_customer, test_package):
    response = client.post("/api/v1/orders/", json=_order_payload(test_customer, test_package))
    assert response.status_code == 401


def test_create_order_inactive_package(
    client: TestClient, reseller_token_headers: tuple, test_customer, db_session: Session
):
    headers, _ = reseller_token_headers
    package = create_package(db_session, is_active=False)
    response = client.post("/api/v1/orders/", json=_order_payload(test_customer, package), headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"
    assert crud_order.count_orders(db_session) == 0


def test_create_order_unknown_customer(client: TestClient, reseller_token_headers: tuple, test_package):
    headers, _ = reseller_token_headers
    payload = {"customer_id": 99999, "package_id": test_package.id, "payment_method": "momo"}
    response = client.post("/api/v1/orders/", json=payload, headers=headers)
    assert response.status_code == 404


def test_create_order_bad_payment_method(client: TestClient, reseller_token_headers: tuple, test_customer, test_package):
    headers, _ = reseller_token_headers
    response = client.post(
        "/api/v1/orders/", json=_order_payload(test_customer, test_package, payment_method="paypal"), headers=headers
    )
    assert response.status_code == 422


def test_admin_direct_sale(client: TestClient, admin_token_headers: tuple, test_customer, test_package):
    headers, _ = admin_token_headers
    response = client.post("/api/v1/orders/", json=_order_payload(test_customer, test_package), headers=headers)
    assert response.status_code == 201
    assert response.json()["reseller_id"] is None
    assert response.json()["commission"] is None


def test_commission_failure_returns_503_and_no_order(
    client: TestClient, reseller_token_headers: tuple, test_customer, test_package, db_session: Session, monkeypatch
):
    from resellerhub.core.exceptions import GatewayError

    def broken_create_commission(db, *, obj_in, commit=True):
        raise GatewayError("storage unavailable")

    monkeypatch.setattr(crud_commission, "create_commission", broken_create_commission)

    headers, _ = reseller_token_headers
    response = client.post("/api/v1/orders/", json=_order_payload(test_customer, test_package), headers=headers)
    assert response.status_code == 503
    assert response.json()["error"] == "CommissionWriteError"
    assert crud_order.count_orders(db_session) == 0


# --- Reading orders ---
def test_admin_lists_orders(client: TestClient, admin_token_headers: tuple, test_reseller, test_customer, test_package, db_session: Session):
    headers, _ = admin_token_headers
    create_order_row(db_session, customer=test_customer, package=test_package, reseller=test_reseller)
    create_order_row(db_session, customer=test_customer, package=test_package, status=PaymentStatus.PENDING)

    response = client.get("/api/v1/orders/", headers=headers)
    assert response.status_code == 200
    assert len(response.json()) == 2

    response = client.get("/api/v1/orders/?payment_status=pending", headers=headers)
    assert [o["payment_status"] for o in response.json()] == ["pending"]


def test_non_admin_cannot_list_all_orders(client: TestClient, reseller_token_headers: tuple):
    headers, _ = reseller_token_headers
    response = client.get("/api/v1/orders/", headers=headers)
    assert response.status_code == 403


def test_my_orders_for_seller_and_customer(
    client: TestClient, reseller_token_headers: tuple, customer_token_headers: tuple, test_package, db_session: Session
):
    seller_headers, seller = reseller_token_headers
    customer_headers, customer = customer_token_headers
    other_customer = create_user(db_session, UserRole.CUSTOMER)
    mine = create_order_row(db_session, customer=customer, package=test_package, reseller=seller)
    create_order_row(db_session, customer=other_customer, package=test_package)

    sold = client.get("/api/v1/orders/mine", headers=seller_headers).json()
    bought = client.get("/api/v1/orders/mine", headers=customer_headers).json()
    assert [o["id"] for o in sold] == [mine.id]
    assert [o["id"] for o in bought] == [mine.id]


def test_order_detail_visibility(
    client: TestClient, reseller_token_headers: tuple, sub_agent_token_headers: tuple,
    test_customer, test_package, db_session: Session
):
    seller_headers, seller = reseller_token_headers
    outsider_headers, _ = sub_agent_token_headers
    order = create_order_row(db_session, customer=test_customer, package=test_package, reseller=seller)

    assert client.get(f"/api/v1/orders/{order.id}", headers=seller_headers).status_code == 200
    assert client.get(f"/api/v1/orders/{order.id}", headers=outsider_headers).status_code == 403
    assert client.get("/api/v1/orders/99999", headers=seller_headers).status_code == 404


# --- Status changes (PATCH /orders/{id}/status) ---
def test_admin_marks_order_paid_commission_stays_pending(
    client: TestClient, admin_token_headers: tuple, reseller_token_headers: tuple, test_customer, test_package
):
    admin_headers, _ = admin_token_headers
    seller_headers, _ = reseller_token_headers
    created = client.post("/api/v1/orders/", json=_order_payload(test_customer, test_package), headers=seller_headers).json()

    response = client.patch(
        f"/api/v1/orders/{created['id']}/status", json={"payment_status": "paid"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["payment_status"] == "paid"
    assert response.json()["commission"]["status"] == "pending"

    again = client.patch(
        f"/api/v1/orders/{created['id']}/status", json={"payment_status": "cancelled"}, headers=admin_headers
    )
    assert again.status_code == 409
    assert again.json()["error"] == "InvalidTransitionError"


def test_stale_expected_status_returns_conflict(
    client: TestClient, admin_token_headers: tuple, test_customer, test_package, db_session: Session
):
    headers, _ = admin_token_headers
    order = create_order_row(db_session, customer=test_customer, package=test_package, status=PaymentStatus.CANCELLED)
    response = client.patch(
        f"/api/v1/orders/{order.id}/status",
        json={"payment_status": "paid", "expected_status": "pending"},
        headers=headers,
    )
    assert response.status_code == 409
    assert response.json()["error"] == "ConflictError"


def test_only_admin_changes_order_status(
    client: TestClient, reseller_token_headers: tuple, test_customer, test_package, db_session: Session
):
    headers, seller = reseller_token_headers
    order = create_order_row(db_session, customer=test_customer, package=test_package, reseller=seller,
                             status=PaymentStatus.PENDING)
    response = client.patch(f"/api/v1/orders/{order.id}/status", json={"payment_status": "paid"}, headers=headers)
    assert response.status_code == 403
    db_session.expire_all()
    assert crud_order.get_order(db_session, order_id=order.id).payment_status == "pending"


def test_status_change_missing_order(client: TestClient, admin_token_headers: tuple):
    headers, _ = admin_token_headers
    response = client.patch("/api/v1/orders/424242/status", json={"payment_status": "paid"}, headers=headers)
    assert response.status_code == 404
