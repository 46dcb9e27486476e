from typing import Optional

from sqlalchemy.orm import Session, joinedload

from . import models


def get_client(db: Session, client_id: str):
    return db.query(models.Client).filter(models.Client.id == client_id).first()


def get_client_by_email(db: Session, email: str):
    return db.query(models.Client).filter(models.Client.email == email).first()


def create_client(db: Session, name: str, email: str, hashed_password: str):
    db_client = models.Client(name=name, email=email, password=hashed_password)
    db.add(db_client)
    db.commit()
    db.refresh(db_client)
    return db_client


def get_recipe(db: Session, recipe_id: str):
    return db.query(models.Recipe).filter(models.Recipe.id == recipe_id).first()


def create_recipe(db: Session, content: str, client_id: str):
    db_recipe = models.Recipe(content=content, client_id=client_id)
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def _not_favorited_by(query, user_id: Optional[str]):
    # no user means nothing to exclude
    if not user_id:
        return query
    return query.filter(
        ~models.Recipe.favorites.any(models.Favorite.client_id == user_id)
    )


def get_recipes_not_favorited(db: Session, user_id: Optional[str], skip: int = 0, limit: int = 5):
    query = _not_favorited_by(db.query(models.Recipe), user_id)
    return (
        query.order_by(models.Recipe.created_at, models.Recipe.id)
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_recipes_not_favorited(db: Session, user_id: Optional[str]) -> int:
    return _not_favorited_by(db.query(models.Recipe), user_id).count()


def get_favorite(db: Session, client_id: str, recipe_id: str):
    return (
        db.query(models.Favorite)
        .filter(
            models.Favorite.client_id == client_id,
            models.Favorite.recipe_id == recipe_id,
        )
        .first()
    )


def create_favorite(db: Session, client_id: str, recipe_id: str):
    db_favorite = models.Favorite(client_id=client_id, recipe_id=recipe_id)
    db.add(db_favorite)
    db.commit()
    db.refresh(db_favorite)
    return db_favorite


def get_favorites_by_client(db: Session, client_id: str):
    return (
        db.query(models.Favorite)
        .options(joinedload(models.Favorite.recipe))
        .filter(models.Favorite.client_id == client_id)
        .order_by(models.Favorite.created_at, models.Favorite.id)
        .all()
    )


def get_favorite_recipe_ids(db: Session, client_id: str):
    rows = (
        db.query(models.Favorite.recipe_id)
        .filter(models.Favorite.client_id == client_id)
        .order_by(models.Favorite.created_at, models.Favorite.id)
        .all()
    )
    return [row.recipe_id for row in rows]
