"""
Async HTTP client for the Recipe Sharing API.

`SessionContext` remembers the logged-in session (token and user) across
runs; `RecipeApiClient` reads the token from it for authenticated calls and
updates it on login, registration and logout.

Usage:
    session = SessionContext()
    async with RecipeApiClient("http://localhost:8000", session) as api:
        await api.login("ann@example.com", "secret")
        recipe = await api.create_recipe("Pancakes", "Fluffy")
        await api.add_ingredients(recipe["id"], [{"name": "Flour", "quantity": "200g"}])
"""

import json
from pathlib import Path
from typing import Any, Optional

import httpx

DEFAULT_SESSION_PATH = Path.home() / ".recipe_app" / "session.json"


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class SessionContext:
    """Bearer token and current user, persisted as JSON."""

    def __init__(self, path: Path | str = DEFAULT_SESSION_PATH):
        self.path = Path(path)

    def read(self) -> dict:
        """Stored session ({"token", "user"}), or {} when logged out."""
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            return {}

    @property
    def token(self) -> Optional[str]:
        return self.read().get("token")

    @property
    def user(self) -> Optional[dict]:
        return self.read().get("user")

    def write(self, token: str, user: Optional[dict] = None) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": user}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class RecipeApiClient:
    """Wraps every API endpoint; returns decoded JSON, raises ApiError on failure."""

    def __init__(
        self,
        base_url: str,
        session: SessionContext,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self.session = session
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "RecipeApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _auth_headers(self) -> dict:
        token = self.session.token
        if not token:
            raise ApiError(401, "User is not authorized")
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, path: str, auth: bool = False, **kwargs) -> Any:
        if auth:
            kwargs["headers"] = {**kwargs.get("headers", {}), **self._auth_headers()}
        response = await self._http.request(method, path, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            raise ApiError(response.status_code, message)
        return response.json()

    # ------------------------------------------------------------
    # Users
    # ------------------------------------------------------------

    async def register(self, name: str, email: str, password: str) -> dict:
        data = await self._request(
            "POST", "/api/users/register", json={"name": name, "email": email, "password": password}
        )
        self.session.write(data["token"], data["user"])
        return data

    async def login(self, email: str, password: str) -> dict:
        data = await self._request("POST", "/api/users/login", json={"email": email, "password": password})
        self.session.write(data["token"], data["user"])
        return data

    def logout(self) -> None:
        self.session.clear()

    async def get_current_user(self) -> dict:
        return await self._request("GET", "/api/users/me", auth=True)

    async def get_user(self, user_id: int) -> dict:
        return await self._request("GET", f"/api/users/{user_id}", auth=True)

    # ------------------------------------------------------------
    # Recipes
    # ------------------------------------------------------------

    async def get_all_recipes(self) -> list[dict]:
        return await self._request("GET", "/api/recipes")

    async def get_recipes_by_user(self, user_id: int) -> list[dict]:
        return await self._request("GET", f"/api/recipes/user/{user_id}")

    async def get_recipe(self, recipe_id: int) -> dict:
        return await self._request("GET", f"/api/recipes/{recipe_id}")

    async def search_recipes(
        self,
        query: str,
        min_rating: Optional[int] = None,
        ingredient: Optional[str] = None,
    ) -> list[dict]:
        params = {"query": query}
        if min_rating is not None:
            params["min_rating"] = min_rating
        if ingredient:
            params["ingredient"] = ingredient
        return await self._request("GET", "/api/recipes/search", params=params)

    async def create_recipe(self, title: str, description: str) -> dict:
        return await self._request(
            "POST", "/api/recipes", auth=True, json={"title": title, "description": description}
        )

    async def update_recipe(
        self,
        recipe_id: int,
        title: str,
        description: str,
        ingredients: Optional[list[dict]] = None,
        steps: Optional[list[dict]] = None,
    ) -> dict:
        payload = {
            "title": title,
            "description": description,
            "ingredients": ingredients or [],
            "steps": steps or [],
        }
        return await self._request("PUT", f"/api/recipes/{recipe_id}", auth=True, json=payload)

    async def delete_recipe(self, recipe_id: int) -> dict:
        return await self._request("DELETE", f"/api/recipes/{recipe_id}", auth=True)

    async def add_ingredients(self, recipe_id: int, ingredients: list[dict]) -> list[dict]:
        return await self._request(
            "POST", f"/api/recipes/{recipe_id}/ingredients", auth=True, json={"ingredients": ingredients}
        )

    async def get_ingredients(self, recipe_id: int) -> list[dict]:
        return await self._request("GET", f"/api/recipes/{recipe_id}/ingredients")

    async def add_steps(self, recipe_id: int, steps: list[dict]) -> list[dict]:
        return await self._request(
            "POST", f"/api/recipes/{recipe_id}/steps", auth=True, json={"steps": steps}
        )

    async def get_steps(self, recipe_id: int) -> list[dict]:
        return await self._request("GET", f"/api/recipes/{recipe_id}/steps")

    # ------------------------------------------------------------
    # Comments, likes, photos
    # ------------------------------------------------------------

    async def add_comment(self, recipe_id: int, text: str) -> dict:
        return await self._request(
            "POST", f"/api/recipes/{recipe_id}/comments", auth=True, json={"text": text}
        )

    async def get_comments(self, recipe_id: int) -> list[dict]:
        return await self._request("GET", f"/api/recipes/{recipe_id}/comments")

    async def add_like(self, recipe_id: int) -> dict:
        return await self._request("POST", f"/api/recipes/{recipe_id}/like", auth=True)

    async def remove_like(self, recipe_id: int) -> dict:
        return await self._request("DELETE", f"/api/recipes/{recipe_id}/like", auth=True)

    async def get_like_count(self, recipe_id: int) -> int:
        data = await self._request("GET", f"/api/recipes/{recipe_id}/like-count")
        return data["likeCount"]

    async def get_like_status(self, recipe_id: int) -> bool:
        data = await self._request("GET", f"/api/recipes/{recipe_id}/like-status", auth=True)
        return data["isLiked"]

    async def add_photos(self, recipe_id: int, files: list[tuple[str, bytes, str]]) -> list[dict]:
        """Upload (filename, content, content_type) tuples."""
        multipart = [("photo", (name, content, content_type)) for name, content, content_type in files]
        return await self._request("POST", f"/api/recipes/{recipe_id}/photos", auth=True, files=multipart)

    async def get_photos(self, recipe_id: int) -> list[dict]:
        return await self._request("GET", f"/api/recipes/{recipe_id}/photos")

    async def delete_photo(self, photo_id: int) -> dict:
        return await self._request("DELETE", f"/api/recipes/photos/{photo_id}", auth=True)
