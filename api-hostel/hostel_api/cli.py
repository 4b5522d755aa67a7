# hostel_api/cli.py
import logging

import click
from flask import Flask

from hostel_api.core.audit.audit_actions import AuditAction
from hostel_api.core.audit.audit_entities import AuditEntity
from hostel_api.core.exceptions import ConflictError, ValidationError
from hostel_api.entities.principal import Role
from hostel_api.infrastructure.database.base_model import BaseModel
from hostel_api.infrastructure.database.session import db_session, engine
from hostel_api.repositories.audit_log_repository import AuditLogRepository
from hostel_api.repositories.refresh_token_repository import RefreshTokenRepository
from hostel_api.repositories.user_repository import UserRepository
from hostel_api.services.audit_service import AuditService
from hostel_api.services.refresh_token_service import RefreshTokenService
from hostel_api.services.user_service import UserService

logger = logging.getLogger(__name__)


def purge_expired_sessions() -> int:
    with db_session() as session:
        removed = RefreshTokenService(repo=RefreshTokenRepository(session)).purge_expired()
    logger.info("expired refresh tokens purged: %s", removed)
    return removed


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Cria as tabelas que ainda não existem."""
        BaseModel.metadata.create_all(engine)
        click.echo("Tables created.")

    @app.cli.command("create-admin")
    @click.option("--email", prompt=True)
    @click.option("--full-name", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_admin(email: str, full_name: str, password: str):
        """Cria um administrador, ou promove a conta se o e-mail já existir."""
        with db_session() as session:
            service = UserService(UserRepository(session))
            existing = service.find_by_email(email)
            audit = AuditService(AuditLogRepository(session))
            if existing is not None:
                service.set_role(user_id=existing.id, role=Role.ADMIN)
                audit.log(
                    entity_name=AuditEntity.USER,
                    entity_id=existing.id,
                    action_name=AuditAction.ROLE_CHANGED,
                    user_id=None,
                    details="role=admin; via=cli",
                )
                click.echo(f"User {existing.email} promoted to admin.")
                return
            try:
                user = service.create_user(full_name=full_name, email=email, password=password, role=Role.ADMIN)
            except (ConflictError, ValidationError) as e:
                raise click.ClickException(str(e)) from e
            audit.log(
                entity_name=AuditEntity.USER,
                entity_id=user.id,
                action_name=AuditAction.REGISTERED,
                user_id=None,
                details="role=admin; via=cli",
            )
            click.echo(f"Admin {user.email} created (id={user.id}).")

    @app.cli.command("purge-sessions")
    def purge_sessions():
        """Remove refresh tokens vencidos (revogados ou não)."""
        click.echo(f"Removed {purge_expired_sessions()} expired refresh tokens.")
