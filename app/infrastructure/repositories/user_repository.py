"""Persistence layer for household members."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import ROLE_PARENT, User
from app.infrastructure.models import UserModel


class UserRepository:
    """Lookup and creation of :class:`User` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self._get_model(id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self._get_model(email=email)
        return self._to_entity(model) if model else None

    def list_parents(self, family_id: int) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .filter(UserModel.family_id == family_id)
            .filter(UserModel.role == ROLE_PARENT)
            .filter(UserModel.is_active.is_(True))
            .order_by(UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email,
            password=user.password,
            role=user.role,
            family_id=user.family_id,
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _get_model(self, **filters) -> UserModel | None:
        return self.session.query(UserModel).filter_by(**filters).first()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            family_id=model.family_id,
            is_active=model.is_active,
            created_at=model.created_at,
        )


__all__ = ["UserRepository"]
