#!/usr/bin/env python3
"""
Print the Postgres DDL for the intake tables.
Run from backend directory: python3 scripts/create_tables.py | psql "$DATABASE_URL"
(or paste the output into the Supabase SQL editor).

The UNIQUE constraint on intake_claims.delivery_id is what makes duplicate
webhook deliveries safe under concurrency; do not drop it.
"""

TABLES = {
    "webhook_logs": """
CREATE TABLE IF NOT EXISTS webhook_logs (
    id uuid PRIMARY KEY,
    delivery_id text NOT NULL,
    received_at timestamptz NOT NULL,
    applicant_name text NOT NULL,
    applicant_email text NOT NULL DEFAULT '',
    external_job_id text,
    external_job_title text,
    status text NOT NULL CHECK (status IN ('success', 'duplicate', 'error')),
    application_id text,
    error_message text,
    raw_payload text
);
CREATE INDEX IF NOT EXISTS webhook_logs_delivery_id_idx ON webhook_logs (delivery_id);
CREATE INDEX IF NOT EXISTS webhook_logs_received_at_idx ON webhook_logs (received_at DESC);
""",
    "intake_claims": """
CREATE TABLE IF NOT EXISTS intake_claims (
    id uuid PRIMARY KEY,
    delivery_id text NOT NULL,
    application_id text,
    created_at timestamptz NOT NULL,
    CONSTRAINT intake_claims_delivery_id_key UNIQUE (delivery_id)
);
""",
    "job_mappings": """
CREATE TABLE IF NOT EXISTS job_mappings (
    id uuid PRIMARY KEY,
    external_job_id text NOT NULL,
    external_job_title text NOT NULL,
    internal_job_id text NOT NULL,
    internal_job_title text NOT NULL,
    location text,
    is_active boolean NOT NULL DEFAULT true,
    created_at timestamptz NOT NULL,
    CONSTRAINT job_mappings_external_job_id_key UNIQUE (external_job_id)
);
""",
}


def create_tables_sql() -> str:
    """DDL for all intake tables, in dependency order."""
    return "\n".join(f"-- {name}{ddl}" for name, ddl in TABLES.items())


if __name__ == "__main__":
    print(create_tables_sql())
