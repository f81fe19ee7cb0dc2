"""DDL for the catalog tables.

section_order is unique but checked at commit time, so the range shift can
move many rows in one UPDATE without tripping over itself.
"""

import logging

import asyncpg

logger = logging.getLogger(__name__)

TABLES = (
    "viewing_history",
    "watchlist",
    "user_roles",
    "profiles",
    "upcoming_content",
    "content",
    "users",
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    username TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL
);

DO $$ BEGIN
    CREATE TYPE app_role AS ENUM ('admin', 'user');
EXCEPTION WHEN duplicate_object THEN NULL;
END $$;

CREATE TABLE IF NOT EXISTS profiles (
    id UUID PRIMARY KEY,
    username TEXT,
    full_name TEXT,
    avatar_url TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS user_roles (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    role app_role NOT NULL DEFAULT 'user',
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS content (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title TEXT NOT NULL,
    type TEXT NOT NULL,
    genres TEXT[] NOT NULL DEFAULT '{}',
    duration TEXT NOT NULL,
    episodes INTEGER,
    rating TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'Published',
    views TEXT NOT NULL DEFAULT '0',
    description TEXT,
    thumbnail_url TEXT,
    video_url TEXT,
    trailer_url TEXT,
    release_year INTEGER,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS upcoming_content (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    title TEXT NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('movie', 'tv')),
    genres TEXT[] NOT NULL DEFAULT '{}',
    episodes INTEGER,
    release_date DATE NOT NULL,
    description TEXT NOT NULL,
    thumbnail_url TEXT,
    trailer_url TEXT,
    section_order INTEGER NOT NULL CHECK (section_order >= 1),
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    CONSTRAINT upcoming_content_section_order_key
        UNIQUE (section_order) DEFERRABLE INITIALLY DEFERRED
);

CREATE TABLE IF NOT EXISTS watchlist (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    content_id UUID NOT NULL,
    added_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS viewing_history (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    content_id UUID NOT NULL,
    watched_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    progress_seconds INTEGER DEFAULT 0,
    completed BOOLEAN DEFAULT FALSE
);
"""


async def create_schema(pool: asyncpg.Pool) -> None:
    async with pool.acquire() as conn:
        await conn.execute(SCHEMA_SQL)
    logger.info("Catalog schema ready")


async def truncate_tables(pool: asyncpg.Pool) -> None:
    async with pool.acquire() as conn:
        await conn.execute(f"TRUNCATE TABLE {', '.join(TABLES)} RESTART IDENTITY")


async def drop_schema(pool: asyncpg.Pool) -> None:
    async with pool.acquire() as conn:
        await conn.execute(f"DROP TABLE IF EXISTS {', '.join(TABLES)}")
        await conn.execute("DROP TYPE IF EXISTS app_role")
