"""Initial schema: users, routes, scores, challenges, friendships, posts, sensor data.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username VARCHAR(64) UNIQUE NOT NULL,
            email VARCHAR(320) UNIQUE NOT NULL,
            password_hash VARCHAR(256) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email_lower
        ON users(lower(email))
    """)

    # --- Routes ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS routes (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name VARCHAR(128) NOT NULL,
            description TEXT,
            is_public BOOLEAN NOT NULL DEFAULT true,
            path_data JSONB NOT NULL,
            distance_meters DOUBLE PRECISION,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_routes_user_id ON routes(user_id)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_routes_public ON routes(is_public, created_at DESC)")

    # --- Scores ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS scores (
            id SERIAL PRIMARY KEY,
            route_id INTEGER NOT NULL REFERENCES routes(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            time_seconds DOUBLE PRECISION NOT NULL,
            max_speed_kmh DOUBLE PRECISION,
            avg_speed_kmh DOUBLE PRECISION,
            max_g_force DOUBLE PRECISION,
            max_inclination_degrees DOUBLE PRECISION,
            max_sound_db DOUBLE PRECISION,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_scores_route_id ON scores(route_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_scores_user_id ON scores(user_id)")
    # Route leaderboard: best time per user on a route
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_scores_route_user_time
        ON scores(route_id, user_id, time_seconds, created_at)
    """)

    # --- Challenges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS challenges (
            id SERIAL PRIMARY KEY,
            route_id INTEGER NOT NULL REFERENCES routes(id) ON DELETE CASCADE,
            challenger_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            challenged_id INTEGER REFERENCES users(id) ON DELETE CASCADE,
            status VARCHAR(16) NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'active', 'completed')),
            challenger_time DOUBLE PRECISION,
            challenged_time DOUBLE PRECISION,
            winner_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            completed_at TIMESTAMPTZ
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS ix_challenges_route_id ON challenges(route_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_challenges_status ON challenges(status)")
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_challenges_open
        ON challenges(created_at DESC)
        WHERE status = 'pending' AND challenged_id IS NULL
    """)

    # --- Friendships ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS friendships (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            friend_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            status VARCHAR(16) NOT NULL DEFAULT 'pending'
                CHECK (status IN ('pending', 'accepted', 'rejected')),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_friendships_pair UNIQUE (user_id, friend_id)
        )
    """)
    op.execute("CREATE INDEX IF NOT EXISTS idx_friendships_friend ON friendships(friend_id, status)")

    # --- Posts ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS posts (
            id SERIAL PRIMARY KEY,
            user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
            title VARCHAR(200) NOT NULL,
            body TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Sensor data ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS sensor_data (
            id SERIAL PRIMARY KEY,
            score_id INTEGER NOT NULL REFERENCES scores(id) ON DELETE CASCADE,
            timestamp_offset_ms INTEGER NOT NULL,
            accel_x DOUBLE PRECISION,
            accel_y DOUBLE PRECISION,
            accel_z DOUBLE PRECISION,
            gyro_x DOUBLE PRECISION,
            gyro_y DOUBLE PRECISION,
            gyro_z DOUBLE PRECISION,
            orientation_azimuth DOUBLE PRECISION,
            orientation_pitch DOUBLE PRECISION,
            orientation_roll DOUBLE PRECISION,
            speed_kmh DOUBLE PRECISION,
            g_force DOUBLE PRECISION,
            inclination_degrees DOUBLE PRECISION,
            sound_db DOUBLE PRECISION,
            nearby_devices INTEGER,
            latitude DOUBLE PRECISION,
            longitude DOUBLE PRECISION,
            altitude DOUBLE PRECISION
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_sensor_data_score_offset
        ON sensor_data(score_id, timestamp_offset_ms)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS sensor_data CASCADE")
    op.execute("DROP TABLE IF EXISTS posts CASCADE")
    op.execute("DROP TABLE IF EXISTS friendships CASCADE")
    op.execute("DROP TABLE IF EXISTS challenges CASCADE")
    op.execute("DROP TABLE IF EXISTS scores CASCADE")
    op.execute("DROP TABLE IF EXISTS routes CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
