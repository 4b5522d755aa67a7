# hostel_api/core/audit/audit_entities.py

class AuditEntity:
    AUTH = "auth"
    SESSION = "session"
    USER = "user"
