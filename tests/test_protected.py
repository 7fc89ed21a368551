from fastapi.testclient import TestClient

from core import config
from main import app
from models.pokemon import Pokemon, caught_pokemons
from models.user import User


PIKACHU = {"name": "pikachu", "type": "electric", "image": "https://img/pikachu.png"}


def _caught_names(client, headers):
    res = client.get("/protected/caught", headers=headers)
    assert res.status_code == 200
    return sorted(p["name"] for p in res.json()["data"])


def test_catch_new_pokemon_creates_and_links(client, db, login):
    headers = login()

    res = client.post("/protected/catch", json=PIKACHU, headers=headers)

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Pokemon caught"
    assert body["data"]["name"] == "pikachu"

    user = db.query(User).filter_by(email="a@x.com").one()
    assert body["data"]["caughtById"] == user.id
    assert db.query(Pokemon).count() == 1
    assert _caught_names(client, headers) == ["pikachu"]


def test_catch_reuses_existing_catalog_entry(client, db, login):
    client.post("/pokemon", json=PIKACHU)
    existing = db.query(Pokemon).one()
    headers = login()

    res = client.post("/protected/catch", json={**PIKACHU, "type": "ignored"}, headers=headers)

    assert res.status_code == 200
    assert res.json()["data"]["id"] == existing.id
    assert res.json()["data"]["type"] == "electric"
    assert db.query(Pokemon).count() == 1


def test_catch_twice_is_idempotent(client, db, login):
    headers = login()

    client.post("/protected/catch", json=PIKACHU, headers=headers)
    client.post("/protected/catch", json=PIKACHU, headers=headers)

    assert db.query(Pokemon).count() == 1
    assert db.query(caught_pokemons).count() == 1
    assert _caught_names(client, headers) == ["pikachu"]


def test_two_users_catch_same_name(client, db, login):
    ash = login("ash@x.com", "pw", "ash")
    misty = login("misty@x.com", "pw", "misty")

    client.post("/protected/catch", json=PIKACHU, headers=ash)
    client.post("/protected/catch", json=PIKACHU, headers=misty)

    assert db.query(Pokemon).count() == 1
    assert _caught_names(client, ash) == ["pikachu"]
    assert _caught_names(client, misty) == ["pikachu"]


def test_caught_lists_only_own_pokemon(client, login):
    ash = login("ash@x.com", "pw", "ash")
    misty = login("misty@x.com", "pw", "misty")

    client.post("/protected/catch", json=PIKACHU, headers=ash)
    client.post("/protected/catch", json={"name": "staryu", "type": "water", "image": "s"}, headers=misty)
    client.post("/protected/catch", json={"name": "psyduck", "type": "water", "image": "p"}, headers=misty)

    assert _caught_names(client, ash) == ["pikachu"]
    assert _caught_names(client, misty) == ["psyduck", "staryu"]


def test_caught_empty_for_new_user(client, login):
    headers = login()

    res = client.get("/protected/caught", headers=headers)

    assert res.status_code == 200
    assert res.json() == {"data": []}


def test_release_clears_ownership(client, db, login):
    headers = login()
    pokemon_id = client.post("/protected/catch", json=PIKACHU, headers=headers).json()["data"]["id"]

    res = client.delete(f"/protected/release/{pokemon_id}", headers=headers)

    assert res.status_code == 200
    assert res.json() == {"message": "Pokemon released"}
    assert _caught_names(client, headers) == []
    assert db.get(Pokemon, pokemon_id).caught_by_id is None


def test_release_ignores_who_owns_it(client, db, login):
    # Current behaviour: any authenticated user can release any Pokémon.
    ash = login("ash@x.com", "pw", "ash")
    misty = login("misty@x.com", "pw", "misty")
    pokemon_id = client.post("/protected/catch", json=PIKACHU, headers=ash).json()["data"]["id"]

    res = client.delete(f"/protected/release/{pokemon_id}", headers=misty)

    assert res.status_code == 200
    assert _caught_names(client, ash) == []
    assert db.get(Pokemon, pokemon_id).caught_by_id is None


def test_release_unknown_id_succeeds_silently(client, login):
    headers = login()

    res = client.delete("/protected/release/999", headers=headers)

    assert res.status_code == 200
    assert res.json() == {"message": "Pokemon released"}


def test_release_with_ownership_check(client, db, login, monkeypatch):
    monkeypatch.setattr(config, "RELEASE_REQUIRES_OWNERSHIP", True)
    ash = login("ash@x.com", "pw", "ash")
    misty = login("misty@x.com", "pw", "misty")
    pokemon_id = client.post("/protected/catch", json=PIKACHU, headers=ash).json()["data"]["id"]

    res = client.delete(f"/protected/release/{pokemon_id}", headers=misty)

    assert res.status_code == 404
    assert res.json() == {"message": "Pokemon not caught by user"}
    assert _caught_names(client, ash) == ["pikachu"]

    res = client.delete(f"/protected/release/{pokemon_id}", headers=ash)

    assert res.status_code == 200
    assert _caught_names(client, ash) == []


def test_protected_routes_require_token(client, db):
    assert client.post("/protected/catch", json=PIKACHU).status_code == 401
    assert client.delete("/protected/release/1").status_code == 401
    assert client.get("/protected/caught").status_code == 401
    assert db.query(Pokemon).count() == 0


def test_malformed_token_is_rejected(client, db, login):
    login()
    headers = {"Authorization": "Bearer not-a-jwt"}

    res = client.post("/protected/catch", json=PIKACHU, headers=headers)

    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"
    assert db.query(Pokemon).count() == 0


def test_deleting_caught_pokemon_drops_links(client, db, login):
    headers = login()
    pokemon_id = client.post("/protected/catch", json=PIKACHU, headers=headers).json()["data"]["id"]

    res = client.request("DELETE", "/pokemon/delete", json={"id": pokemon_id})

    assert res.status_code == 200
    assert db.query(caught_pokemons).count() == 0
    assert _caught_names(client, headers) == []


def test_unhandled_error_is_generic_500(client, login, monkeypatch):
    headers = login()

    def broken(*args, **kwargs):
        raise RuntimeError("secret connection string")

    monkeypatch.setattr("api.protected.list_caught", broken)
    unguarded = TestClient(app, raise_server_exceptions=False)

    res = unguarded.get("/protected/caught", headers=headers)

    assert res.status_code == 500
    assert res.json() == {"message": "Internal Server Error"}
    assert "secret" not in res.text
