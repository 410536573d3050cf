from conftest import auth_headers


def _new_user(**overrides):
    payload = {
        "name": "Diego Lima",
        "username": "diego",
        "password": "diego123",
        "phone": "11977776666",
        "email": "diego@example.com",
        "state": "RJ",
        "city": "Niteroi",
        "street": "Av. Central",
        "number": 7,
        "role": "owner",
    }
    payload.update(overrides)
    return payload


async def test_admin_creates_user_with_role(client, admin):
    response = await client.post("/usuarios/", json=_new_user(), headers=auth_headers(admin))
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "owner"


async def test_owner_cannot_create_users(client, owner):
    response = await client.post("/usuarios/", json=_new_user(), headers=auth_headers(owner))
    assert response.status_code == 403


async def test_list_users(client, owner, customer, admin):
    response = await client.get("/usuarios/?limit=2", headers=auth_headers(owner))
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 3
    assert body["pagination"]["hasNext"] is True
    assert len(body["data"]) == 2


async def test_customer_cannot_list_users(client, customer):
    response = await client.get("/usuarios/", headers=auth_headers(customer))
    assert response.status_code == 403
    assert response.json()["message"].startswith("Access denied")


async def test_update_me_keeps_role(client, customer):
    response = await client.put(
        "/usuarios/me",
        json={"city": "Santos", "role": "admin"},
        headers=auth_headers(customer),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["city"] == "Santos"
    assert data["role"] == "customer"


async def test_update_me_password_allows_new_login(client, customer):
    response = await client.put("/usuarios/me", json={"password": "brandnew1"}, headers=auth_headers(customer))
    assert response.status_code == 200

    login = await client.post("/auth/login", json={"username": customer.username, "password": "brandnew1"})
    assert login.status_code == 200


async def test_admin_changes_role(client, admin, customer):
    response = await client.put(
        f"/usuarios/{customer.id}",
        json={"role": "owner"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "owner"


async def test_update_to_taken_email(client, admin, customer, owner):
    response = await client.put(
        f"/usuarios/{customer.id}",
        json={"email": owner.email},
        headers=auth_headers(admin),
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered"


async def test_get_user_by_id(client, owner, customer):
    response = await client.get(f"/usuarios/{customer.id}", headers=auth_headers(owner))
    assert response.status_code == 200
    assert response.json()["data"]["email"] == customer.email

    missing = await client.get("/usuarios/9999", headers=auth_headers(owner))
    assert missing.status_code == 404


async def test_search_by_name(client, owner, customer):
    found = await client.get("/usuarios/nome/ali", headers=auth_headers(owner))
    assert found.status_code == 200
    assert [u["id"] for u in found.json()["data"]] == [customer.id]

    none = await client.get("/usuarios/nome/zzz", headers=auth_headers(owner))
    assert none.status_code == 404


async def test_users_by_role(client, admin, owner, customer):
    response = await client.get("/usuarios/role/owner", headers=auth_headers(admin))
    assert response.status_code == 200
    assert [u["id"] for u in response.json()["data"]] == [owner.id]


async def test_user_with_rentals_cannot_be_deleted(client, admin, customer, vehicle):
    booked = await client.post(
        "/locacoes/",
        json={"start_date": "2024-01-01", "end_date": "2024-01-02", "vehicle_id": vehicle.id},
        headers=auth_headers(customer),
    )
    assert booked.status_code == 201

    response = await client.delete(f"/usuarios/{customer.id}", headers=auth_headers(admin))
    assert response.status_code == 400
