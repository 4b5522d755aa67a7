# hostel_api/infrastructure/database/models/__init__.py
# importa os models para registrar as tabelas no metadata

from hostel_api.infrastructure.database.models.audit_log_model import AuditLogModel  # noqa: F401
from hostel_api.infrastructure.database.models.refresh_token_model import RefreshTokenModel  # noqa: F401
from hostel_api.infrastructure.database.models.user_model import UserModel  # noqa: F401
