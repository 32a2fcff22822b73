from thriftsy.models.user import User
from thriftsy.extensions import db
from thriftsy.enums import UserRole
from thriftsy.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from flask_jwt_extended import create_access_token


class AuthService:
    @staticmethod
    def _token_for(user: User) -> str:
        return create_access_token(identity=str(user.id), additional_claims={"role": user.role.value})

    @staticmethod
    def signup(name: str, email: str, password: str, **kwargs) -> dict:
        email = email.strip().lower()
        if User.query.filter_by(email=email).first():
            raise ConflictError("Email is already registered")

        user = User(name=name.strip(), email=email, phone=kwargs.get("phone"), role=UserRole.USER)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        return {"token": AuthService._token_for(user), "user": user.to_dict()}

    @staticmethod
    def signin(email: str, password: str) -> dict:
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user or not user.check_password(password):
            raise UnauthorizedError("Invalid email or password")

        return {"token": AuthService._token_for(user), "user": user.to_dict()}

    @staticmethod
    def get_user(user_id: int) -> User:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def update_profile(user_id: int, **fields) -> User:
        user = AuthService.get_user(user_id)
        if "name" in fields:
            user.name = fields["name"]
        if "phone" in fields:
            user.phone = fields["phone"]
        db.session.commit()
        return user

    @staticmethod
    def change_password(user_id: int, current_password: str, new_password: str) -> None:
        user = AuthService.get_user(user_id)
        if not user.check_password(current_password):
            raise UnauthorizedError("Current password is incorrect")
        user.set_password(new_password)
        db.session.commit()

    @staticmethod
    def list_users():
        return User.query.order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def set_role(user_id: int, role: str) -> User:
        user = AuthService.get_user(user_id)
        try:
            user.role = UserRole(role)
        except ValueError:
            raise ValidationError(f"Unknown role: {role}")
        db.session.commit()
        return user
