from conftest import auth_headers, make_vehicle


def _vehicle(**overrides):
    payload = {"make": "Honda", "model": "Civic", "year": 2021, "color": "Black", "daily_rate": 150.0}
    payload.update(overrides)
    return payload


async def test_owner_creates_vehicle(client, owner):
    response = await client.post("/veiculos/", json=_vehicle(), headers=auth_headers(owner))
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["model"] == "Civic"
    assert data["available"] is True


async def test_customer_cannot_create_vehicle(client, customer):
    response = await client.post("/veiculos/", json=_vehicle(), headers=auth_headers(customer))
    assert response.status_code == 403


async def test_vehicle_validation(client, owner):
    response = await client.post("/veiculos/", json=_vehicle(daily_rate=0), headers=auth_headers(owner))
    assert response.status_code == 400
    assert "daily_rate" in response.json()["fields"]


async def test_listing_shows_available_vehicles_by_default(client, session_maker):
    await make_vehicle(session_maker, model="Free")
    await make_vehicle(session_maker, model="Busy", available=False)

    default = (await client.get("/veiculos/")).json()
    assert [v["model"] for v in default["data"]] == ["Free"]
    assert default["pagination"]["total"] == 1

    everything = (await client.get("/veiculos/?available_only=false")).json()
    assert everything["pagination"]["total"] == 2


async def test_vehicle_lookups(client, session_maker):
    await make_vehicle(session_maker, model="Onix", year=2020, daily_rate=90.0)
    await make_vehicle(session_maker, model="HB20", year=2023, daily_rate=120.0)

    by_year = (await client.get("/veiculos/ano/2023")).json()["data"]
    assert [v["model"] for v in by_year] == ["HB20"]

    by_model = (await client.get("/veiculos/modelo/Onix")).json()["data"]
    assert [v["year"] for v in by_model] == [2020]

    by_price = (await client.get("/veiculos/preco?min_price=100&max_price=200")).json()["data"]
    assert [v["model"] for v in by_price] == ["HB20"]

    missing = await client.get("/veiculos/9999")
    assert missing.status_code == 404


async def test_update_vehicle_cannot_set_availability(client, owner, vehicle):
    response = await client.put(
        f"/veiculos/{vehicle.id}",
        json={"color": "Red", "available": False},
        headers=auth_headers(owner),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["color"] == "Red"
    assert data["available"] is True


async def test_attach_category(client, owner, vehicle):
    response = await client.post(
        f"/veiculos/categoria/{vehicle.id}",
        json={"category_name": "SUV", "description": "Sport utility"},
        headers=auth_headers(owner),
    )
    assert response.status_code == 201
    assert [c["name"] for c in response.json()["data"]["categories"]] == ["SUV"]

    duplicate = await client.post(
        f"/veiculos/categoria/{vehicle.id}",
        json={"category_name": "SUV"},
        headers=auth_headers(owner),
    )
    assert duplicate.status_code == 400

    by_category = (await client.get("/veiculos/categoria/SUV")).json()["data"]
    assert [v["id"] for v in by_category] == [vehicle.id]

    with_categories = (await client.get("/veiculos/com-categoria")).json()["data"]
    assert with_categories[0]["categories"][0]["description"] == "Sport utility"


async def test_vehicle_with_active_rental_cannot_be_deleted(client, customer, owner, vehicle):
    rental = (
        await client.post(
            "/locacoes/",
            json={"start_date": "2024-01-01", "end_date": "2024-01-02", "vehicle_id": vehicle.id},
            headers=auth_headers(customer),
        )
    ).json()["data"]

    refused = await client.delete(f"/veiculos/{vehicle.id}", headers=auth_headers(owner))
    assert refused.status_code == 400

    await client.put(f"/locacoes/{rental['id']}/recusar", headers=auth_headers(owner))

    deleted = await client.delete(f"/veiculos/{vehicle.id}", headers=auth_headers(owner))
    assert deleted.status_code == 204
    assert (await client.get(f"/veiculos/{vehicle.id}")).status_code == 404

    gone = await client.get(f"/locacoes/{rental['id']}", headers=auth_headers(customer))
    assert gone.status_code == 404


async def test_category_crud(client, owner, customer):
    created = await client.post(
        "/categorias/",
        json={"name": "Hatch", "description": "Compact cars"},
        headers=auth_headers(owner),
    )
    assert created.status_code == 201
    category_id = created.json()["data"]["id"]

    duplicate = await client.post("/categorias/", json={"name": "Hatch"}, headers=auth_headers(owner))
    assert duplicate.status_code == 400

    forbidden = await client.post("/categorias/", json={"name": "Sedan"}, headers=auth_headers(customer))
    assert forbidden.status_code == 403

    listed = (await client.get("/categorias/")).json()
    assert listed["pagination"]["total"] == 1

    updated = await client.put(
        f"/categorias/{category_id}",
        json={"description": "Small cars"},
        headers=auth_headers(owner),
    )
    assert updated.json()["data"]["description"] == "Small cars"

    deleted = await client.delete(f"/categorias/{category_id}", headers=auth_headers(owner))
    assert deleted.status_code == 204
    assert (await client.get(f"/categorias/{category_id}")).status_code == 404


async def test_health_and_root(client):
    assert (await client.get("/health/")).json() == {"status": "ok"}
    assert (await client.get("/")).json() == {"msg": "SmartAutoApp"}
