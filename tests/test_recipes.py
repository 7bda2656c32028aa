from sqlalchemy import func, select

from app.models.recipe import Comment, Ingredient, Like, Recipe, RecipePhoto, Step
from app.models.schemas import IngredientUpsert, StepUpsert
from app.services.recipes import recipe_service
from app.errors import ConflictError, ValidationError
from tests.conftest import auth, create_recipe, register

import pytest


async def test_create_recipe(client):
    token, user = await register(client)
    recipe = await create_recipe(client, token, "Pancakes", "Fluffy")
    assert recipe["id"]
    assert recipe["title"] == "Pancakes"
    assert recipe["user_id"] == user["id"]

    res = await client.get(f"/api/recipes/{recipe['id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["author"] == "Ann"
    assert body["like_count"] == 0


async def test_create_recipe_requires_auth(client):
    res = await client.post("/api/recipes", json={"title": "T", "description": "D"})
    assert res.status_code == 401


async def test_create_recipe_requires_title_and_description(client):
    token, _ = await register(client)
    res = await client.post("/api/recipes", json={"title": "Only title"}, headers=auth(token))
    assert res.status_code == 400
    assert "description" in res.json()["message"]

    res = await client.post(
        "/api/recipes", json={"title": "  ", "description": "x"}, headers=auth(token)
    )
    assert res.status_code == 400


async def test_get_missing_recipe(client):
    res = await client.get("/api/recipes/999")
    assert res.status_code == 404
    assert res.json() == {"message": "Recipe not found"}


async def test_list_sorted_by_like_count(client):
    ann, _ = await register(client, "Ann")
    bob, _ = await register(client, "Bob")
    cat, _ = await register(client, "Cat")
    plain = await create_recipe(client, ann, "Plain")
    popular = await create_recipe(client, ann, "Popular")
    liked_once = await create_recipe(client, bob, "Liked once")

    for token in (ann, bob, cat):
        await client.post(f"/api/recipes/{popular['id']}/like", headers=auth(token))
    await client.post(f"/api/recipes/{liked_once['id']}/like", headers=auth(cat))

    res = await client.get("/api/recipes")
    assert res.status_code == 200
    rows = res.json()
    assert [r["id"] for r in rows] == [popular["id"], liked_once["id"], plain["id"]]
    assert [r["like_count"] for r in rows] == [3, 1, 0]


async def test_recipes_by_user(client):
    ann, ann_user = await register(client, "Ann")
    bob, _ = await register(client, "Bob")
    await create_recipe(client, ann, "Ann's soup")
    await create_recipe(client, bob, "Bob's stew")

    res = await client.get(f"/api/recipes/user/{ann_user['id']}")
    assert [r["title"] for r in res.json()] == ["Ann's soup"]
    assert res.json()[0]["author"] == "Ann"


# ============================================================
# Ingredients & steps
# ============================================================

async def test_ingredients_round_trip(client):
    token, _ = await register(client)
    recipe = await create_recipe(client, token)

    res = await client.post(
        f"/api/recipes/{recipe['id']}/ingredients",
        json={"ingredients": [{"name": "Salt", "quantity": "1tsp"}]},
        headers=auth(token),
    )
    assert res.status_code == 201
    created = res.json()
    assert len(created) == 1
    assert isinstance(created[0]["id"], int)

    res = await client.get(f"/api/recipes/{recipe['id']}/ingredients")
    assert res.status_code == 200
    ingredients = res.json()
    assert len(ingredients) == 1
    assert ingredients[0]["id"] == created[0]["id"]
    assert ingredients[0]["name"] == "Salt"
    assert ingredients[0]["quantity"] == "1tsp"


async def test_ingredient_values_are_stored_verbatim(client):
    token, _ = await register(client)
    recipe = await create_recipe(client, token)
    name = "Baker's flour'); DROP TABLE recipes; --"

    res = await client.post(
        f"/api/recipes/{recipe['id']}/ingredients",
        json={"ingredients": [{"name": name, "quantity": "2 cups"}]},
        headers=auth(token),
    )
    assert res.status_code == 201

    ingredients = (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json()
    assert ingredients[0]["name"] == name
    assert (await client.get("/api/recipes")).status_code == 200


async def test_add_ingredients_validation(client):
    token, _ = await register(client)
    recipe = await create_recipe(client, token)
    url = f"/api/recipes/{recipe['id']}/ingredients"

    res = await client.post(url, json={"ingredients": []}, headers=auth(token))
    assert res.status_code == 400

    res = await client.post(
        url,
        json={"ingredients": [{"name": "Salt", "quantity": "1tsp"}, {"name": "Pepper"}]},
        headers=auth(token),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Each ingredient must have a name and quantity"
    assert (await client.get(url)).json() == []


async def test_add_ingredients_to_missing_recipe(client):
    token, _ = await register(client)
    res = await client.post(
        "/api/recipes/404/ingredients",
        json={"ingredients": [{"name": "Salt", "quantity": "1tsp"}]},
        headers=auth(token),
    )
    assert res.status_code == 404


async def test_steps_are_ordered_and_accept_both_spellings(client):
    token, _ = await register(client)
    recipe = await create_recipe(client, token)
    url = f"/api/recipes/{recipe['id']}/steps"

    res = await client.post(
        url,
        json={"steps": [
            {"stepNumber": 2, "description": "Cook"},
            {"step_number": 1, "description": "Mix"},
        ]},
        headers=auth(token),
    )
    assert res.status_code == 201

    steps = (await client.get(url)).json()
    assert [(s["step_number"], s["description"]) for s in steps] == [(1, "Mix"), (2, "Cook")]


async def test_add_steps_validation(client):
    token, _ = await register(client)
    recipe = await create_recipe(client, token)
    url = f"/api/recipes/{recipe['id']}/steps"

    res = await client.post(url, json={"steps": [{"description": "No number"}]}, headers=auth(token))
    assert res.status_code == 400
    assert res.json()["message"] == "Each step must contain stepNumber and description"

    res = await client.post(url, json={"steps": [{"stepNumber": 0, "description": "Zero"}]}, headers=auth(token))
    assert res.status_code == 400


async def test_duplicate_step_number_is_conflict(client):
    token, _ = await register(client)
    recipe = await create_recipe(client, token)
    url = f"/api/recipes/{recipe['id']}/steps"

    await client.post(url, json={"steps": [{"stepNumber": 1, "description": "Mix"}]}, headers=auth(token))
    res = await client.post(url, json={"steps": [{"stepNumber": 1, "description": "Again"}]}, headers=auth(token))
    assert res.status_code == 409
    assert len((await client.get(url)).json()) == 1


# ============================================================
# Update transaction
# ============================================================

async def _recipe_with_children(client, token):
    recipe = await create_recipe(client, token, "Original", "Before")
    ingredients = (await client.post(
        f"/api/recipes/{recipe['id']}/ingredients",
        json={"ingredients": [{"name": "Salt", "quantity": "1tsp"}, {"name": "Flour", "quantity": "200g"}]},
        headers=auth(token),
    )).json()
    steps = (await client.post(
        f"/api/recipes/{recipe['id']}/steps",
        json={"steps": [{"stepNumber": 1, "description": "Mix"}]},
        headers=auth(token),
    )).json()
    return recipe, ingredients, steps


async def test_update_upserts_and_keeps_omitted_rows(client):
    token, _ = await register(client)
    recipe, ingredients, steps = await _recipe_with_children(client, token)
    salt, flour = ingredients

    res = await client.put(
        f"/api/recipes/{recipe['id']}",
        json={
            "title": "Updated",
            "description": "After",
            "ingredients": [
                {"id": salt["id"], "name": "Sea salt", "quantity": "2tsp"},
                {"name": "Sugar", "quantity": "50g"},
            ],
            "steps": [
                {"id": steps[0]["id"], "step_number": 1, "description": "Whisk"},
                {"step_number": 2, "description": "Bake"},
            ],
        },
        headers=auth(token),
    )
    assert res.status_code == 200
    assert res.json() == {"message": "Recipe updated successfully"}

    detail = (await client.get(f"/api/recipes/{recipe['id']}")).json()
    assert (detail["title"], detail["description"]) == ("Updated", "After")

    rows = (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json()
    by_id = {row["id"]: row for row in rows}
    assert by_id[salt["id"]]["name"] == "Sea salt"
    # Flour was not in the payload and stays as it was
    assert by_id[flour["id"]]["name"] == "Flour"
    assert sorted(row["name"] for row in rows) == ["Flour", "Sea salt", "Sugar"]

    step_rows = (await client.get(f"/api/recipes/{recipe['id']}/steps")).json()
    assert [(s["step_number"], s["description"]) for s in step_rows] == [(1, "Whisk"), (2, "Bake")]


async def test_update_rolls_back_when_an_ingredient_is_unknown(client):
    token, _ = await register(client)
    recipe, ingredients, _ = await _recipe_with_children(client, token)
    before = (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json()

    res = await client.put(
        f"/api/recipes/{recipe['id']}",
        json={
            "title": "Updated",
            "description": "After",
            "ingredients": [
                {"id": ingredients[0]["id"], "name": "Pepper", "quantity": "1"},
                {"name": "Sugar", "quantity": "50g"},
                {"id": 9999, "name": "Ghost", "quantity": "1"},
            ],
        },
        headers=auth(token),
    )
    assert res.status_code == 404

    detail = (await client.get(f"/api/recipes/{recipe['id']}")).json()
    assert (detail["title"], detail["description"]) == ("Original", "Before")
    assert (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json() == before


async def test_update_rolls_back_on_constraint_violation(client):
    token, _ = await register(client)
    recipe, _, steps = await _recipe_with_children(client, token)

    res = await client.put(
        f"/api/recipes/{recipe['id']}",
        json={
            "title": "Updated",
            "description": "After",
            "ingredients": [{"name": "Sugar", "quantity": "50g"}],
            "steps": [
                {"step_number": 2, "description": "Bake"},
                {"step_number": 2, "description": "Bake again"},
            ],
        },
        headers=auth(token),
    )
    assert res.status_code == 409

    detail = (await client.get(f"/api/recipes/{recipe['id']}")).json()
    assert detail["title"] == "Original"
    names = [i["name"] for i in (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json()]
    assert "Sugar" not in names
    assert (await client.get(f"/api/recipes/{recipe['id']}/steps")).json() == steps


async def test_update_requires_title_and_description(client, db):
    token, _ = await register(client)
    recipe = await create_recipe(client, token, "Original", "Before")

    res = await client.put(
        f"/api/recipes/{recipe['id']}",
        json={"title": "New", "ingredients": [{"name": "Sugar", "quantity": "1"}]},
        headers=auth(token),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Title and description are required"
    count = (await db.execute(select(func.count(Ingredient.id)))).scalar()
    assert count == 0


async def test_update_missing_recipe(client):
    token, _ = await register(client)
    res = await client.put(
        "/api/recipes/999", json={"title": "T", "description": "D"}, headers=auth(token)
    )
    assert res.status_code == 404


async def test_update_rejects_non_positive_step_numbers(client):
    token, _ = await register(client)
    recipe, _, steps = await _recipe_with_children(client, token)

    for bad_step in (
        {"step_number": -3, "description": "New"},
        {"step_number": 0, "description": "New"},
        {"id": steps[0]["id"], "step_number": 0},
    ):
        res = await client.put(
            f"/api/recipes/{recipe['id']}",
            json={"title": "Updated", "description": "After", "steps": [bad_step]},
            headers=auth(token),
        )
        assert res.status_code == 400
        assert res.json() == {"message": "Step numbers must be positive"}

    assert (await client.get(f"/api/recipes/{recipe['id']}/steps")).json() == steps
    assert (await client.get(f"/api/recipes/{recipe['id']}")).json()["title"] == "Original"


async def test_update_rejects_incomplete_new_children(client):
    token, _ = await register(client)
    recipe, ingredients, steps = await _recipe_with_children(client, token)

    cases = [
        ({"ingredients": [{"quantity": "1"}]}, "Each ingredient must have a name and quantity"),
        ({"ingredients": [{"name": "Sugar"}]}, "Each ingredient must have a name and quantity"),
        ({"ingredients": [{"id": ingredients[0]["id"], "name": "  "}]}, "Each ingredient must have a name and quantity"),
        ({"steps": [{"description": "No number"}]}, "Each step must contain stepNumber and description"),
        ({"steps": [{"step_number": 3}]}, "Each step must contain stepNumber and description"),
    ]
    for children, message in cases:
        res = await client.put(
            f"/api/recipes/{recipe['id']}",
            json={"title": "Updated", "description": "After", **children},
            headers=auth(token),
        )
        assert res.status_code == 400
        assert res.json() == {"message": message}

    assert (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json() == ingredients
    assert (await client.get(f"/api/recipes/{recipe['id']}/steps")).json() == steps


async def test_update_edit_may_omit_fields(client):
    token, _ = await register(client)
    recipe, ingredients, _ = await _recipe_with_children(client, token)
    salt = ingredients[0]

    res = await client.put(
        f"/api/recipes/{recipe['id']}",
        json={"title": "T", "description": "D", "ingredients": [{"id": salt["id"], "quantity": "3tsp"}]},
        headers=auth(token),
    )
    assert res.status_code == 200
    rows = {r["id"]: r for r in (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json()}
    assert (rows[salt["id"]]["name"], rows[salt["id"]]["quantity"]) == ("Salt", "3tsp")


async def test_update_with_id_zero_targets_an_existing_row(client):
    token, _ = await register(client)
    recipe, ingredients, _ = await _recipe_with_children(client, token)

    res = await client.put(
        f"/api/recipes/{recipe['id']}",
        json={"title": "T", "description": "D", "ingredients": [{"id": 0, "name": "Ghost", "quantity": "1"}]},
        headers=auth(token),
    )
    assert res.status_code == 404
    assert res.json() == {"message": "Ingredient 0 not found"}
    assert (await client.get(f"/api/recipes/{recipe['id']}/ingredients")).json() == ingredients


async def test_update_service_validates_before_touching_the_session(db):
    with pytest.raises(ValidationError):
        await recipe_service.update(
            db, 1, "", "desc", ingredients=[IngredientUpsert(name="Salt", quantity="1")]
        )
    assert not db.in_transaction()


async def test_update_service_rolls_back_steps_with_ingredients(client, db):
    token, _ = await register(client)
    recipe, _, _ = await _recipe_with_children(client, token)

    with pytest.raises(ConflictError):
        await recipe_service.update(
            db,
            recipe["id"],
            "Changed",
            "Changed",
            ingredients=[IngredientUpsert(name="Butter", quantity="10g")],
            steps=[StepUpsert(step_number=1, description="Clashes with the existing step 1")],
        )

    title = (await db.execute(select(Recipe.title).where(Recipe.id == recipe["id"]))).scalar_one()
    assert title == "Original"
    butter = await db.execute(select(Ingredient).where(Ingredient.name == "Butter"))
    assert butter.first() is None


# ============================================================
# Delete
# ============================================================

async def test_delete_by_non_owner_looks_like_missing_recipe(client, db):
    owner, _ = await register(client, "Ann")
    other, _ = await register(client, "Bob")
    recipe = await create_recipe(client, owner)
    await client.post(f"/api/recipes/{recipe['id']}/like", headers=auth(owner))

    not_owner = await client.delete(f"/api/recipes/{recipe['id']}", headers=auth(other))
    missing = await client.delete("/api/recipes/999", headers=auth(other))

    assert not_owner.status_code == missing.status_code == 404
    assert not_owner.json() == missing.json() == {"message": "Recipe not found or not authorized"}

    # Nothing was removed by the refused delete
    assert (await client.get(f"/api/recipes/{recipe['id']}")).status_code == 200
    likes = (await db.execute(select(func.count(Like.id)))).scalar()
    assert likes == 1


async def test_delete_cascades_to_dependents(client, db):
    token, _ = await register(client)
    recipe, _, _ = await _recipe_with_children(client, token)
    rid = recipe["id"]
    await client.post(f"/api/recipes/{rid}/like", headers=auth(token))
    await client.post(f"/api/recipes/{rid}/comments", json={"text": "Yum"}, headers=auth(token))
    await client.post(
        f"/api/recipes/{rid}/photos",
        files=[("photo", ("dish.png", b"\x89PNG\r\n\x1a\n", "image/png"))],
        headers=auth(token),
    )

    res = await client.delete(f"/api/recipes/{rid}", headers=auth(token))
    assert res.status_code == 200
    assert res.json() == {"message": "Recipe deleted successfully"}

    for model in (Recipe, Ingredient, Step, Like, Comment, RecipePhoto):
        count = (await db.execute(select(func.count()).select_from(model))).scalar()
        assert count == 0, model.__tablename__
