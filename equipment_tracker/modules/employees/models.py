# Supabase tables: profiles (studio members), employee_permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

employee_permissions:
- id: uuid (primary key)
- employee_id: uuid (foreign key to profiles.id, not null)
- studio_id: uuid (foreign key to studios.id, not null)
- can_access_dashboard: boolean (default: true)
- can_access_equipment: boolean (default: true)
- can_access_issues: boolean (default: true)
- can_access_employees: boolean (default: false)
- can_access_reports: boolean (default: false)
- can_access_analytics: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (employee_id, studio_id)

Owners never get a row; they hold every capability. An employee without a row
falls back to the column defaults above (see core/capabilities.py).
"""
