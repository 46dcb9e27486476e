"""Functionality behind the routes."""

import logging
import math
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, schemas
from .config import get_settings
from .errors import AuthError, Conflict, NotFound, ValidationError
from .security import hash_password, password_too_long, verify_password

logger = logging.getLogger(__name__)


# Clients

def register_client(db: Session, name: Optional[str], email: Optional[str], password: Optional[str]):
    if not name or not email or not password:
        raise ValidationError("Nome, email e senha são obrigatórios")
    if password_too_long(password):
        raise ValidationError("A senha deve ter no máximo 72 bytes")

    if crud.get_client_by_email(db, email):
        raise Conflict("E-mail já cadastrado")

    try:
        client = crud.create_client(db, name=name, email=email, hashed_password=hash_password(password))
    except IntegrityError:
        # another request registered the same email after our check
        db.rollback()
        raise Conflict("E-mail já cadastrado")

    logger.info("Registered client %s", client.id)
    return client


def login_client(db: Session, email: Optional[str], password: Optional[str]):
    if not email or not password:
        raise ValidationError("Email e senha são obrigatórios")

    client = crud.get_client_by_email(db, email)
    if not client:
        raise NotFound("Usuário não encontrado")

    if not verify_password(password, client.password):
        logger.warning("Failed login for client %s", client.id)
        raise AuthError("Senha incorreta")

    return client


# Recipes

def create_recipe(db: Session, content: Optional[str], client_id: Optional[str]):
    if not content or not client_id:
        raise ValidationError("Conteúdo e clientId são obrigatórios")

    if not crud.get_client(db, client_id):
        raise NotFound("Usuário não encontrado")

    recipe = crud.create_recipe(db, content=content, client_id=client_id)
    logger.info("Client %s created recipe %s", client_id, recipe.id)
    return recipe


# largest OFFSET the database driver can bind
MAX_SKIP = 2**63 - 1


def _parse_int(value: Optional[str], name: str, default: int, minimum: int, maximum: int) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        number = int(value.strip())
    except ValueError:
        raise ValidationError(f"{name} deve ser um número inteiro")
    if number < minimum:
        raise ValidationError(f"{name} deve ser maior ou igual a {minimum}")
    if number > maximum:
        raise ValidationError(f"{name} deve ser menor ou igual a {maximum}")
    return number


def parse_page_params(take: Optional[str], skip: Optional[str]) -> Tuple[int, int]:
    """Turn the ``take``/``skip`` query strings into ``(skip, take)``.

    Missing values fall back to ``skip=0`` and the configured page size.
    Non-numeric values, a ``skip`` outside ``0..MAX_SKIP``, and a ``take``
    below 1 or above ``max_page_size`` raise :class:`ValidationError`.
    """
    settings = get_settings()
    parsed_skip = _parse_int(skip, "skip", default=0, minimum=0, maximum=MAX_SKIP)
    parsed_take = _parse_int(
        take, "take", default=settings.default_page_size, minimum=1, maximum=settings.max_page_size
    )
    return parsed_skip, parsed_take


def get_recipe_page(db: Session, user_id: Optional[str], skip: int = 0, take: int = 5) -> schemas.RecipePage:
    """Return the recipes ``user_id`` has not favorited yet, one page at a time.

    ``skip`` and ``take`` are expected to come from :func:`parse_page_params`.
    """
    recipes = crud.get_recipes_not_favorited(db, user_id, skip=skip, limit=take)
    total = crud.count_recipes_not_favorited(db, user_id)
    return schemas.RecipePage(
        recipes=[schemas.Recipe.model_validate(r) for r in recipes],
        skip=skip,
        take=take,
        total_pages=math.ceil(total / take),
        total_recipes=total,
    )


# Favorites

def add_favorite(db: Session, client_id: Optional[str], recipe_id: Optional[str]):
    if not client_id:
        raise ValidationError("clientId é obrigatório")
    if not recipe_id:
        raise ValidationError("recipeId é obrigatório")

    if not crud.get_client(db, client_id):
        raise NotFound("Usuário não encontrado")
    if not crud.get_recipe(db, recipe_id):
        raise NotFound("Receita não encontrada")

    if crud.get_favorite(db, client_id, recipe_id):
        raise Conflict("Esta receita já está nos favoritos")

    try:
        favorite = crud.create_favorite(db, client_id=client_id, recipe_id=recipe_id)
    except IntegrityError:
        db.rollback()
        raise Conflict("Esta receita já está nos favoritos")

    logger.info("Client %s favorited recipe %s", client_id, recipe_id)
    return favorite


def list_favorites(db: Session, client_id: str):
    return crud.get_favorites_by_client(db, client_id)


def list_favorite_recipe_ids(db: Session, client_id: str):
    # an empty list is a normal answer, same as list_favorites
    return crud.get_favorite_recipe_ids(db, client_id)
