"""
Use Cases

Organized into domain folders:
- auth/: Login, token lifecycle, passwords
- users/: User management inside a tenant
- maintenance/: Housekeeping of expired records

Import from subdirectories.
"""
