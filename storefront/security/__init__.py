from storefront.security.tokens import ADMIN_ROLES, issue_access_token

__all__ = ["ADMIN_ROLES", "issue_access_token"]
