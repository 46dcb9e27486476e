import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import schemas, services
from .config import get_settings
from .db import SessionLocal, init_db
from .errors import AppError, ServiceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB once at startup
    init_db()
    yield


app = FastAPI(title="Receitas API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # the API reports every input problem as 400, not FastAPI's 422
    return JSONResponse(
        status_code=400,
        content={"message": "Requisição inválida", "errors": jsonable_encoder(exc.errors())},
    )


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@app.post("/cadastro", status_code=201, response_model=schemas.ClientResponse)
def cadastro(body: schemas.ClientCreate, db: Session = Depends(get_db)):
    try:
        client = services.register_client(db, body.name, body.email, body.password)
    except AppError:
        raise
    except Exception:
        logger.exception("Failed to register client")
        raise ServiceError("Erro ao cadastrar cliente")
    return schemas.ClientResponse(
        message="Cliente cadastrado com sucesso!",
        client=schemas.Client.model_validate(client),
    )


@app.post("/login", response_model=schemas.ClientResponse)
def login(body: schemas.LoginRequest, db: Session = Depends(get_db)):
    try:
        client = services.login_client(db, body.email, body.password)
    except AppError:
        raise
    except Exception:
        logger.exception("Login failed unexpectedly")
        raise ServiceError("Erro no login")
    return schemas.ClientResponse(
        message="Login bem-sucedido!",
        client=schemas.Client.model_validate(client),
    )


@app.post("/favoritos", status_code=201, response_model=schemas.FavoriteResponse)
def add_favorite(body: schemas.FavoriteCreate, db: Session = Depends(get_db)):
    try:
        favorite = services.add_favorite(db, body.client_id, body.recipe_id)
    except AppError:
        raise
    except Exception:
        logger.exception("Failed to add favorite")
        raise ServiceError("Erro ao adicionar favorito")
    return schemas.FavoriteResponse(
        message="Receita adicionada aos favoritos com sucesso!",
        favorite=schemas.Favorite.model_validate(favorite),
    )


@app.get("/favoritos/ids/{client_id}", response_model=schemas.FavoriteIdsResponse)
def favorite_recipe_ids(client_id: str, db: Session = Depends(get_db)):
    try:
        recipe_ids = services.list_favorite_recipe_ids(db, client_id)
    except Exception:
        logger.exception("Failed to list favorite recipe ids for %s", client_id)
        raise ServiceError("Erro ao buscar IDs dos favoritos")
    if not recipe_ids:
        return schemas.FavoriteIdsResponse(message="Nenhum favorito", recipe_ids=[])
    return schemas.FavoriteIdsResponse(
        message="IDs das receitas favoritas encontrados",
        recipe_ids=recipe_ids,
    )


@app.get("/favoritos/{client_id}", response_model=schemas.FavoriteListResponse)
def favorites_by_client(client_id: str, db: Session = Depends(get_db)):
    try:
        favorites = services.list_favorites(db, client_id)
    except Exception:
        logger.exception("Failed to list favorites for %s", client_id)
        raise ServiceError("Erro ao buscar favoritos")
    if not favorites:
        return schemas.FavoriteListResponse(
            message="Nenhum favorito encontrado para este usuário.",
            favorites=[],
        )
    return schemas.FavoriteListResponse(
        message="Favoritos encontrados",
        favorites=[schemas.FavoriteWithRecipe.model_validate(f) for f in favorites],
    )


@app.get("/receitas", response_model=schemas.RecipePageResponse)
def list_recipes(
    take: Optional[str] = None,
    skip: Optional[str] = None,
    user_id: Optional[str] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
):
    try:
        parsed_skip, parsed_take = services.parse_page_params(take, skip)
        page = services.get_recipe_page(db, user_id, skip=parsed_skip, take=parsed_take)
    except AppError:
        raise
    except Exception:
        logger.exception("Failed to load recipe page")
        raise ServiceError("Erro ao buscar receitas")
    return schemas.RecipePageResponse(message="Receitas encontradas", **page.model_dump())


@app.post("/receitas", status_code=201, response_model=schemas.RecipeResponse)
def create_recipe(body: schemas.RecipeCreate, db: Session = Depends(get_db)):
    try:
        recipe = services.create_recipe(db, body.content, body.client_id)
    except AppError:
        raise
    except Exception:
        logger.exception("Failed to create recipe")
        raise ServiceError("Erro ao criar receita")
    return schemas.RecipeResponse(
        message="Receita criada com sucesso!",
        recipe=schemas.Recipe.model_validate(recipe),
    )
