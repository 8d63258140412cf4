# Supabase tables: maintenance_records
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

maintenance_records:
- id: uuid (primary key)
- studio_id: uuid (foreign key to studios.id, not null)
- equipment_id: uuid (foreign key to equipment.id, not null)
- maintenance_type: text (not null) - values: repair, routine, inspection, upgrade
- description: text (not null)
- cost: numeric (nullable)
- performed_by: text (nullable) - free text, e.g. the repair shop
- performed_at: timestamp (not null, default: now())
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())

Records are an append-only log. They never change equipment.quantity or status.
"""
