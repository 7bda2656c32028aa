"""
Migration 001: Create recipe sharing tables

Creates:
- users: accounts (unique email, hashed password)
- recipes: owned by a user
- ingredients, steps: owned by a recipe (step_number unique per recipe)
- comments, likes, recipe_photos: attached to a recipe (one like per user per recipe)
"""

import asyncio
from sqlalchemy import text
from app.db.database import engine

TABLES = {
    "users": """
        CREATE TABLE users (
            id SERIAL PRIMARY KEY,
            name VARCHAR(100) NOT NULL,
            email VARCHAR(255) NOT NULL UNIQUE,
            password VARCHAR(255) NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        );
    """,
    "recipes": """
        CREATE TABLE recipes (
            id SERIAL PRIMARY KEY,
            title VARCHAR(255) NOT NULL,
            description TEXT NOT NULL,
            user_id INTEGER NOT NULL REFERENCES users(id),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        );
    """,
    "ingredients": """
        CREATE TABLE ingredients (
            id SERIAL PRIMARY KEY,
            recipe_id INTEGER NOT NULL REFERENCES recipes(id),
            name VARCHAR(255) NOT NULL,
            quantity VARCHAR(100) NOT NULL DEFAULT ''
        );
    """,
    "steps": """
        CREATE TABLE steps (
            id SERIAL PRIMARY KEY,
            recipe_id INTEGER NOT NULL REFERENCES recipes(id),
            step_number INTEGER NOT NULL,
            description TEXT NOT NULL,
            CONSTRAINT uq_steps_recipe_step_number UNIQUE (recipe_id, step_number)
        );
    """,
    "comments": """
        CREATE TABLE comments (
            id SERIAL PRIMARY KEY,
            recipe_id INTEGER NOT NULL REFERENCES recipes(id),
            user_id INTEGER REFERENCES users(id),
            text TEXT NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        );
    """,
    "likes": """
        CREATE TABLE likes (
            id SERIAL PRIMARY KEY,
            recipe_id INTEGER NOT NULL REFERENCES recipes(id),
            user_id INTEGER NOT NULL REFERENCES users(id),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
            CONSTRAINT uq_likes_recipe_user UNIQUE (recipe_id, user_id)
        );
    """,
    "recipe_photos": """
        CREATE TABLE recipe_photos (
            id SERIAL PRIMARY KEY,
            recipe_id INTEGER NOT NULL REFERENCES recipes(id),
            photo_url TEXT NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
        );
    """,
}

# Lookups by recipe (and by owner for recipes)
INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);",
    "CREATE INDEX IF NOT EXISTS idx_recipes_user_id ON recipes(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_ingredients_recipe_id ON ingredients(recipe_id);",
    "CREATE INDEX IF NOT EXISTS idx_steps_recipe_id ON steps(recipe_id);",
    "CREATE INDEX IF NOT EXISTS idx_comments_recipe_id ON comments(recipe_id);",
    "CREATE INDEX IF NOT EXISTS idx_likes_recipe_id ON likes(recipe_id);",
    "CREATE INDEX IF NOT EXISTS idx_likes_user_id ON likes(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_recipe_photos_recipe_id ON recipe_photos(recipe_id);",
]


async def upgrade():
    """Create all tables (in dependency order) and their indexes."""
    async with engine.begin() as conn:
        for table_name, ddl in TABLES.items():
            result = await conn.execute(text("""
                SELECT table_name
                FROM information_schema.tables
                WHERE table_name = :table_name
            """), {"table_name": table_name})

            if result.scalar_one_or_none() is None:
                await conn.execute(text(ddl))
                print(f"✅ Created {table_name} table")
            else:
                print(f"ℹ️ Table '{table_name}' already exists. Skipping.")

        for statement in INDEXES:
            await conn.execute(text(statement))
        print("✅ Indexes in place")


async def downgrade():
    """Drop all tables, dependents first."""
    async with engine.begin() as conn:
        for table_name in reversed(list(TABLES)):
            await conn.execute(text(f"DROP TABLE IF EXISTS {table_name};"))
        print("✅ Downgrade complete: removed recipe sharing tables")


if __name__ == "__main__":
    import sys
    if len(sys.argv) > 1 and sys.argv[1] == "down":
        asyncio.run(downgrade())
    else:
        asyncio.run(upgrade())
