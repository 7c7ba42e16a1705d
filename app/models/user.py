from datetime import datetime
from typing import Dict, Any
from enum import Enum

from app.extensions import db, bcrypt


class UserRoles(Enum):
    ADMIN = "admin"
    STAFF = "staff"


class User(db.Model):
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurant.id'), nullable=False, index=True)

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), default=UserRoles.ADMIN.value, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<User {self.id} - {self.email}>'

    # -------- Password --------
    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    # -------- Roles & tenancy --------
    def has_role(self, role_name: str) -> bool:
        return self.role == role_name

    @property
    def is_admin(self) -> bool:
        return self.has_role(UserRoles.ADMIN.value)

    def can_access_restaurant(self, restaurant_id) -> bool:
        """Check the user belongs to the tenant owning a resource"""
        return restaurant_id is not None and self.restaurant_id == restaurant_id

    def token_claims(self) -> Dict[str, Any]:
        """Additional JWT claims carried by admin tokens"""
        return {
            'restaurantId': self.restaurant_id,
            'role': self.role,
            'email': self.email,
        }
