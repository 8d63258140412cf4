# Supabase tables: equipment
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

equipment:
- id: uuid (primary key)
- studio_id: uuid (foreign key to studios.id, not null)
- name: text (not null)
- code: text (nullable) - studio's own product code, e.g. PROD001
- serial_number: text (nullable)
- quantity: integer (not null, default: 1, check: quantity >= 0) - units currently in the studio
- category_id: uuid (foreign key to categories.id, nullable, on delete set null)
- purchase_date: date (nullable)
- purchase_price: numeric (nullable)
- vendor_name: text (nullable)
- vendor_contact: text (nullable)
- vendor_email: text (nullable)
- condition: text (nullable) - values: excellent, good, fair, poor, needs_repair
- status: text (not null, default: 'available') - values: available, issued, maintenance, retired
- notes: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

quantity is only ever changed by the stock ledger (modules/issues/stock.py)
through compare-and-swap updates, or by an owner editing the record.
available/issued status is re-derived from quantity after each stock
movement; maintenance/retired are owner-set flags left untouched.
"""
