# Supabase tables: studios
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

studios:
- id: uuid (primary key)
- name: text (not null)
- owner_id: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

A studio is the tenant boundary. Every other inventory table carries a
studio_id and the RLS policies in supabase/schema.sql only expose rows whose
studio_id matches the caller's profile.
"""
