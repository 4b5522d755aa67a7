# hostel_api/core/audit/audit_actions.py

class AuditAction:
    REGISTERED = "REGISTERED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    REFRESH_SUCCESS = "REFRESH_SUCCESS"
    REFRESH_FAILED = "REFRESH_FAILED"
    REFRESH_REUSED = "REFRESH_REUSED"
    LOGOUT = "LOGOUT"
    LOGOUT_ALL = "LOGOUT_ALL"
    SESSION_REVOKED = "SESSION_REVOKED"
    ROLE_CHANGED = "ROLE_CHANGED"
