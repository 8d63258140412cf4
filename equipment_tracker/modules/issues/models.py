# Supabase tables: issues
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

issues:
- id: uuid (primary key)
- studio_id: uuid (foreign key to studios.id, not null)
- equipment_id: uuid (foreign key to equipment.id, not null)
- person_name: text (not null) - who took the equipment; not a user account
- person_contact: text (nullable) - phone or email
- quantity_issued: integer (not null, check: quantity_issued > 0)
- issued_by: uuid (foreign key to profiles.id, not null)
- issued_at: timestamp (default: now())
- expected_return_date: date (nullable)
- actual_return_date: timestamp (nullable)
- issue_condition: text (nullable) - equipment condition when it left
- return_condition: text (nullable) - excellent, good, fair, poor, needs_repair, damaged
- damaged_qty: integer (default: 0)
- issue_notes: text (nullable)
- return_notes: text (nullable)
- status: text (not null, default: 'issued') - values: issued, returned
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Lifecycle: a row is created as "issued" and moves once to "returned".
Returned rows are never reopened by callers; a new checkout is a new row.
The only reverse write is the service undoing its own return when restocking
the equipment fails. Clients can read this table but never write it; rows are
written by IssueService through the service-role client.
"""
