"""
SQL schema for the gateway configuration table.
Run these queries in your Supabase SQL editor.
"""

CREATE_SYSTEM_CONFIG_TABLE = """
-- Single-row table selecting the active try-on backend
CREATE TABLE IF NOT EXISTS system_config (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    key VARCHAR(64) UNIQUE NOT NULL DEFAULT 'main_config',
    active_model VARCHAR(64) NOT NULL DEFAULT 'IDM-VTON',
    updated_by VARCHAR(255),
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW(),
    CONSTRAINT active_model_known CHECK (active_model IN ('IDM-VTON', 'OOTDiffusion'))
);

-- Enable Row Level Security
ALTER TABLE system_config ENABLE ROW LEVEL SECURITY;

-- Policy: Service role can do everything (for API)
CREATE POLICY system_config_service_role_all ON system_config
    FOR ALL
    USING (auth.role() = 'service_role');
"""

SEED_SYSTEM_CONFIG = """
-- Default selection; the gateway also falls back to IDM-VTON when the row is missing
INSERT INTO system_config (key, active_model)
VALUES ('main_config', 'IDM-VTON')
ON CONFLICT (key) DO NOTHING;
"""

CREATE_UPDATED_AT_TRIGGER = """
-- Function to update updated_at timestamp
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = NOW();
    RETURN NEW;
END;
$$ language 'plpgsql';

DROP TRIGGER IF EXISTS update_system_config_updated_at ON system_config;
CREATE TRIGGER update_system_config_updated_at
    BEFORE UPDATE ON system_config
    FOR EACH ROW
    EXECUTE FUNCTION update_updated_at_column();
"""

# Combined setup script
FULL_SCHEMA_SETUP = f"""
-- =====================================================
-- Try-On Gateway Configuration Schema Setup
-- =====================================================
-- Run this in your Supabase SQL Editor
-- =====================================================

{CREATE_SYSTEM_CONFIG_TABLE}

{SEED_SYSTEM_CONFIG}

{CREATE_UPDATED_AT_TRIGGER}

-- =====================================================
-- Setup Complete!
-- =====================================================
"""

if __name__ == "__main__":
    print(FULL_SCHEMA_SETUP)
