from charity_cms.auth.permissions import AdminUserDep, require_admin, require_role

__all__ = ["AdminUserDep", "require_admin", "require_role"]
