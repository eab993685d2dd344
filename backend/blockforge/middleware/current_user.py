from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from blockforge.extensions import db
from blockforge.models.user import User


def current_user_middleware(app):
    @app.before_request
    def load_current_user():
        """Attach the JWT's user to ``g`` when a valid token is present."""
        g.current_user = None
        try:
            verify_jwt_in_request(optional=True)
        except (JWTExtendedException, PyJWTError):
            # Protected endpoints re-verify and answer 401 themselves
            return None

        identity = get_jwt_identity()
        if identity is None:
            return None

        user = db.session.get(User, str(identity))
        if user is not None and user.is_active:
            g.current_user = user
        return None
