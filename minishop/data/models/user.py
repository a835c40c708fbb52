from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from minishop.data.database import Base
from minishop.data.models._ids import new_public_id


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    email = Column(String(255), unique=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    roles = relationship("UserRoleModel", back_populates="user", cascade="all, delete-orphan")


class RoleModel(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    name = Column(String(64), unique=True, nullable=False)
    description = Column(String(255), nullable=True)

    users = relationship("UserRoleModel", back_populates="role", cascade="all, delete-orphan")


class UserRoleModel(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)

    user = relationship("UserModel", back_populates="roles")
    role = relationship("RoleModel", back_populates="users")

    __table_args__ = (UniqueConstraint("user_id", "role_id", name="u_user_role"),)
