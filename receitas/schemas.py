from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # JSON uses camelCase (clientId, recipeId); Python code uses snake_case
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Request bodies. Every field is optional here so that a missing field
# reaches the service and gets the API's own 400 message.

class ClientCreate(CamelModel):
    name: Optional[str] = Field(None, json_schema_extra={"example": "Maria"})
    email: Optional[str] = Field(None, json_schema_extra={"example": "maria@example.com"})
    password: Optional[str] = Field(None, json_schema_extra={"example": "segredo123"})


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class FavoriteCreate(CamelModel):
    client_id: Optional[str] = None
    recipe_id: Optional[str] = None


class RecipeCreate(CamelModel):
    content: Optional[str] = Field(
        None, json_schema_extra={"example": "Bolo de cenoura: misture tudo e asse."}
    )
    client_id: Optional[str] = None


# Representations

class Client(CamelModel):
    id: str
    name: str
    email: str


class Recipe(CamelModel):
    id: str
    content: str
    client_id: str
    created_at: Optional[datetime] = None


class Favorite(CamelModel):
    id: str
    client_id: str
    recipe_id: str
    created_at: Optional[datetime] = None


class FavoriteWithRecipe(Favorite):
    recipe: Recipe


# Response envelopes

class ClientResponse(CamelModel):
    message: str
    client: Client


class FavoriteResponse(CamelModel):
    message: str
    favorite: Favorite


class FavoriteListResponse(CamelModel):
    message: str
    favorites: List[FavoriteWithRecipe]


class FavoriteIdsResponse(CamelModel):
    message: str
    recipe_ids: List[str]


class RecipeResponse(CamelModel):
    message: str
    recipe: Recipe


class RecipePage(CamelModel):
    recipes: List[Recipe]
    skip: int
    take: int
    total_pages: int
    total_recipes: int


class RecipePageResponse(RecipePage):
    message: str
