import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .db import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Client(Base):
    __tablename__ = "clients"
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    email = Column(String(320), unique=True, index=True, nullable=False)
    password = Column(String(100), nullable=False)  # bcrypt hash
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    recipes = relationship("Recipe", back_populates="client")
    favorites = relationship("Favorite", back_populates="client")


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(String(36), primary_key=True, default=new_id)
    content = Column(Text, nullable=False)
    client_id = Column(String(36), ForeignKey("clients.id"), index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="recipes")
    favorites = relationship("Favorite", back_populates="recipe")


class Favorite(Base):
    __tablename__ = "favorites"
    id = Column(String(36), primary_key=True, default=new_id)
    client_id = Column(String(36), ForeignKey("clients.id"), index=True, nullable=False)
    recipe_id = Column(String(36), ForeignKey("recipes.id"), index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    client = relationship("Client", back_populates="favorites")
    recipe = relationship("Recipe", back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("client_id", "recipe_id", name="uq_favorite_client_recipe"),
    )
