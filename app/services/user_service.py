from flask import current_app

from app.extensions import db
from app.models import Restaurant, User, UserRoles


class UserService:
    @staticmethod
    def register_restaurant(data):
        """
        Creates a restaurant and its first admin user.

        Returns (user, error); error is set when the email is already registered.
        """
        email = data['email'].lower()
        if User.query.filter_by(email=email).first():
            return None, "Email already in use"

        restaurant = Restaurant(name=data['restaurant_name'].strip())
        db.session.add(restaurant)
        db.session.flush()

        user = User(
            restaurant_id=restaurant.id,
            name=data['name'].strip(),
            email=email,
            role=UserRoles.ADMIN.value
        )
        user.set_password(data['password'])
        db.session.add(user)
        db.session.commit()

        current_app.logger.info(f"Registered restaurant {restaurant.id} with admin {user.id}")
        return user, None
