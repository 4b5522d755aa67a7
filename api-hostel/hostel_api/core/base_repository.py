# hostel_api/core/base_repository.py
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

TModel = TypeVar("TModel")


class BaseRepository(Generic[TModel]):
    """Repositórios recebem a Session do db_session(); commit/rollback ficam lá."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, model: TModel) -> TModel:
        # flush para o id gerado já estar disponível (rotated_from_id, auditoria)
        self._session.add(model)
        self._session.flush()
        return model

    def rollback(self) -> None:
        # após erro de flush a Session só volta a ser usável depois do rollback
        self._session.rollback()
