"""
Use Cases

Organized into domain folders:
- tenants/: Tenant lifecycle, domain binding, permission seeding
- auth/: Tenant panel login
- users/: Tenant panel user management
- audit/: Activity log

Import from subdirectories for better organization.
"""
