"""HTTP tests for /api/auth."""


async def test_register_login_me(client):
    r = await client.post(
        "/api/auth/register",
        json={"email": "sales@example.org", "password": "s3cret!", "name": "Sales"},
    )
    assert r.status_code == 201
    registered = r.json()
    assert registered["user"]["email"] == "sales@example.org"
    assert registered["token_type"] == "bearer"

    r = await client.post("/api/auth/login", json={"email": "sales@example.org", "password": "s3cret!"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == registered["user"]["id"]

    # The alternative header is accepted too.
    r = await client.get("/api/auth/me", headers={"token": token})
    assert r.status_code == 200


async def test_register_same_email_twice_conflicts(client):
    payload = {"email": "dup@example.org", "password": "s3cret!"}
    assert (await client.post("/api/auth/register", json=payload)).status_code == 201
    assert (await client.post("/api/auth/register", json=payload)).status_code == 409


async def test_login_with_wrong_password(client):
    await client.post("/api/auth/register", json={"email": "x@example.org", "password": "s3cret!"})

    r = await client.post("/api/auth/login", json={"email": "x@example.org", "password": "wrong"})

    assert r.status_code == 401


async def test_created_customer_is_owned_by_token_user(client):
    r = await client.post("/api/auth/register", json={"email": "owner2@example.org", "password": "s3cret!"})
    token = r.json()["access_token"]
    user_id = r.json()["user"]["id"]

    r = await client.post(
        "/api/customers",
        json={"name": "Mine"},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert r.json()["customer"]["assignedTo"] == user_id


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "healthy"}
