# flake8: noqa
import os
import sys
import uuid
from pathlib import Path

# Ensure project root is on sys.path so `receitas` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402
# cheap hashes keep the suite fast
os.environ.setdefault("RECEITAS_BCRYPT_ROUNDS", "4")

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient  # noqa: E402

from receitas import app as app_module
from receitas import models, services
from receitas.db import Base


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
# Use StaticPool so the same in-memory database is shared across connections
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create tables in the in-memory database
Base.metadata.create_all(bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app_module.app.dependency_overrides[app_module.get_db] = override_get_db
client = TestClient(app_module.app)


def unique_email():
    return f"{uuid.uuid4().hex[:10]}@example.com"


def register(name="Maria", email=None, password="segredo123"):
    email = email or unique_email()
    res = client.post("/cadastro", json={"name": name, "email": email, "password": password})
    assert res.status_code == 201
    return res.json()["client"]


def create_recipe(client_id, content="Bolo de cenoura"):
    res = client.post("/receitas", json={"content": content, "clientId": client_id})
    assert res.status_code == 201
    return res.json()["recipe"]


def test_register_returns_client_without_password():
    email = unique_email()
    res = client.post("/cadastro", json={"name": "Ana", "email": email, "password": "abc123"})
    assert res.status_code == 201
    data = res.json()
    assert data["message"] == "Cliente cadastrado com sucesso!"
    assert set(data["client"].keys()) == {"id", "name", "email"}
    assert data["client"]["email"] == email


def test_register_stores_hashed_password():
    c = register(password="plaintext-pw")
    db = TestingSessionLocal()
    stored = db.query(models.Client).filter(models.Client.id == c["id"]).first()
    db.close()
    assert stored.password != "plaintext-pw"
    assert stored.password.startswith("$2")


def test_register_missing_password():
    res = client.post("/cadastro", json={"name": "Ana", "email": unique_email()})
    assert res.status_code == 400
    assert res.json() == {"message": "Nome, email e senha são obrigatórios"}


def test_register_empty_name():
    res = client.post("/cadastro", json={"name": "", "email": unique_email(), "password": "x"})
    assert res.status_code == 400


def test_register_duplicate_email():
    email = unique_email()
    register(email=email)
    res = client.post("/cadastro", json={"name": "Outra", "email": email, "password": "outra"})
    assert res.status_code == 400
    assert res.json()["message"] == "E-mail já cadastrado"


def test_register_malformed_body_is_400():
    res = client.post("/cadastro", json={"name": 123, "email": ["x"], "password": None})
    assert res.status_code == 400
    assert res.json()["message"] == "Requisição inválida"


def test_login_success():
    email = unique_email()
    created = register(email=email, password="certa")
    res = client.post("/login", json={"email": email, "password": "certa"})
    assert res.status_code == 200
    data = res.json()
    assert data["message"] == "Login bem-sucedido!"
    assert data["client"] == created


def test_login_wrong_password():
    email = unique_email()
    register(email=email, password="certa")
    res = client.post("/login", json={"email": email, "password": "errada"})
    assert res.status_code == 401
    assert res.json()["message"] == "Senha incorreta"


def test_login_unknown_email():
    res = client.post("/login", json={"email": unique_email(), "password": "qualquer"})
    assert res.status_code == 404
    assert res.json()["message"] == "Usuário não encontrado"


def test_login_missing_fields():
    res = client.post("/login", json={"email": unique_email()})
    assert res.status_code == 400


def test_create_recipe():
    owner = register()
    res = client.post("/receitas", json={"content": "Pão de queijo", "clientId": owner["id"]})
    assert res.status_code == 201
    data = res.json()
    assert data["message"] == "Receita criada com sucesso!"
    assert data["recipe"]["content"] == "Pão de queijo"
    assert data["recipe"]["clientId"] == owner["id"]


def test_create_recipe_missing_content():
    owner = register()
    res = client.post("/receitas", json={"clientId": owner["id"]})
    assert res.status_code == 400
    assert res.json()["message"] == "Conteúdo e clientId são obrigatórios"


def test_create_recipe_unknown_client():
    res = client.post("/receitas", json={"content": "x", "clientId": str(uuid.uuid4())})
    assert res.status_code == 404


def test_add_favorite_and_duplicate():
    owner = register()
    recipe = create_recipe(owner["id"])

    res = client.post("/favoritos", json={"clientId": owner["id"], "recipeId": recipe["id"]})
    assert res.status_code == 201
    fav = res.json()["favorite"]
    assert fav["clientId"] == owner["id"]
    assert fav["recipeId"] == recipe["id"]

    res = client.post("/favoritos", json={"clientId": owner["id"], "recipeId": recipe["id"]})
    assert res.status_code == 400
    assert res.json()["message"] == "Esta receita já está nos favoritos"


def test_add_favorite_missing_fields():
    res = client.post("/favoritos", json={"recipeId": "abc"})
    assert res.status_code == 400
    assert res.json()["message"] == "clientId é obrigatório"

    res = client.post("/favoritos", json={"clientId": "abc"})
    assert res.status_code == 400
    assert res.json()["message"] == "recipeId é obrigatório"


def test_add_favorite_unknown_client_or_recipe():
    owner = register()
    recipe = create_recipe(owner["id"])

    res = client.post("/favoritos", json={"clientId": str(uuid.uuid4()), "recipeId": recipe["id"]})
    assert res.status_code == 404
    assert res.json()["message"] == "Usuário não encontrado"

    res = client.post("/favoritos", json={"clientId": owner["id"], "recipeId": str(uuid.uuid4())})
    assert res.status_code == 404
    assert res.json()["message"] == "Receita não encontrada"


def test_list_favorites_embeds_recipe():
    owner = register()
    recipe = create_recipe(owner["id"], content="Feijoada")
    client.post("/favoritos", json={"clientId": owner["id"], "recipeId": recipe["id"]})

    res = client.get(f"/favoritos/{owner['id']}")
    assert res.status_code == 200
    data = res.json()
    assert data["message"] == "Favoritos encontrados"
    assert len(data["favorites"]) == 1
    assert data["favorites"][0]["recipe"]["content"] == "Feijoada"


def test_list_favorites_empty():
    owner = register()
    res = client.get(f"/favoritos/{owner['id']}")
    assert res.status_code == 200
    assert res.json()["favorites"] == []


def test_favorite_ids():
    owner = register()
    r1 = create_recipe(owner["id"])
    r2 = create_recipe(owner["id"])
    client.post("/favoritos", json={"clientId": owner["id"], "recipeId": r1["id"]})
    client.post("/favoritos", json={"clientId": owner["id"], "recipeId": r2["id"]})

    res = client.get(f"/favoritos/ids/{owner['id']}")
    assert res.status_code == 200
    assert sorted(res.json()["recipeIds"]) == sorted([r1["id"], r2["id"]])


def test_favorite_ids_empty_is_not_an_error():
    owner = register()
    res = client.get(f"/favoritos/ids/{owner['id']}")
    assert res.status_code == 200
    assert res.json()["recipeIds"] == []


def test_recipe_feed_excludes_favorites():
    owner = register()
    fan = register()
    recipes = [create_recipe(owner["id"], content=f"Receita {i}") for i in range(3)]
    client.post("/favoritos", json={"clientId": fan["id"], "recipeId": recipes[0]["id"]})

    res = client.get("/receitas", params={"userId": fan["id"], "take": "100"})
    assert res.status_code == 200
    data = res.json()
    assert data["message"] == "Receitas encontradas"
    ids = {r["id"] for r in data["recipes"]}
    assert recipes[0]["id"] not in ids
    assert recipes[1]["id"] in ids and recipes[2]["id"] in ids

    fav_ids = client.get(f"/favoritos/ids/{fan['id']}").json()["recipeIds"]
    assert not ids.intersection(fav_ids)


def test_recipe_feed_pagination_fields():
    owner = register()
    for i in range(6):
        create_recipe(owner["id"], content=f"Pag {i}")

    res = client.get("/receitas", params={"take": "4", "skip": "0"})
    assert res.status_code == 200
    data = res.json()
    assert data["take"] == 4
    assert data["skip"] == 0
    assert len(data["recipes"]) == 4
    assert data["totalPages"] == -(-data["totalRecipes"] // 4)


def test_recipe_feed_defaults():
    res = client.get("/receitas")
    assert res.status_code == 200
    data = res.json()
    assert data["skip"] == 0
    assert data["take"] == 5


def test_recipe_feed_rejects_bad_paging():
    assert client.get("/receitas", params={"take": "abc"}).status_code == 400
    assert client.get("/receitas", params={"take": "0"}).status_code == 400
    assert client.get("/receitas", params={"skip": "-1"}).status_code == 400
    assert client.get("/receitas", params={"take": "100000"}).status_code == 400
    assert client.get("/receitas", params={"skip": "9" * 30}).status_code == 400


def test_unexpected_error_does_not_leak_details(monkeypatch):
    def boom(db, client_id):
        raise SQLAlchemyError("connection string with secrets")

    monkeypatch.setattr(services, "list_favorites", boom)
    res = client.get(f"/favoritos/{uuid.uuid4()}")
    assert res.status_code == 500
    assert res.json() == {"message": "Erro ao buscar favoritos"}
