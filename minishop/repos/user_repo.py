# minishop/repos/user_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from minishop.data.models.user import UserModel, RoleModel, UserRoleModel
from minishop.domain.roles import normalize_role_name


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, public_id: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel)
            .where(UserModel.public_id == public_id)
            .options(selectinload(UserModel.roles).selectinload(UserRoleModel.role))
        ).scalar_one_or_none()

    def get_role_names(self, public_id: str) -> set[str]:
        rows = self.db.execute(
            select(RoleModel.name)
            .join(UserRoleModel, UserRoleModel.role_id == RoleModel.id)
            .join(UserModel, UserModel.id == UserRoleModel.user_id)
            .where(UserModel.public_id == public_id)
        ).scalars()
        return set(rows)

    def get_role(self, name: str) -> RoleModel | None:
        return self.db.execute(
            select(RoleModel).where(RoleModel.name == normalize_role_name(name))
        ).scalar_one_or_none()

    def create_role(self, name: str, description: str | None = None) -> RoleModel:
        role = RoleModel(name=normalize_role_name(name), description=description)
        self.db.add(role)
        self.db.flush()
        return role

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user

    def assign_role(self, user: UserModel, role: RoleModel) -> None:
        exists = self.db.execute(
            select(UserRoleModel).where(
                UserRoleModel.user_id == user.id,
                UserRoleModel.role_id == role.id,
            )
        ).scalar_one_or_none()
        if not exists:
            self.db.add(UserRoleModel(user_id=user.id, role_id=role.id))
            self.db.flush()

    def commit(self):
        self.db.commit()
