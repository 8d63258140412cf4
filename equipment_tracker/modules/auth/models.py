# Supabase Auth + profiles table
# This module uses Supabase's built-in authentication system for credentials.
# Each auth user gets one row in public.profiles holding studio membership and role.

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (not null)
- full_name: text (nullable)
- studio_id: uuid (foreign key to studios.id, nullable until onboarded)
- role: text (not null, default: 'employee') - values: owner, employee
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Identity comes from the auth token; role and studio scope always come from
this table, never from token claims. Clients may only update full_name: role
and studio_id change through the service-role client during onboarding and
employee removal.
"""
