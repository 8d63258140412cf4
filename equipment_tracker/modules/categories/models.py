# Supabase tables: categories
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

categories:
- id: uuid (primary key)
- studio_id: uuid (foreign key to studios.id, not null)
- name: text (not null)
- created_at: timestamp (default: now())

Names are kept unique per studio by the service (case-insensitive); the
database does not enforce it.
"""
