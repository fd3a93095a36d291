from flask import Blueprint, jsonify
from flask_login import current_user

from vidshare.errors import Unauthorized
from vidshare.routes.payload import json_body, text_field
from vidshare.services import catalog

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    data = json_body()
    user = catalog.register(
        text_field(data, 'name'),
        text_field(data, 'email'),
        text_field(data, 'password', strip=False),
    )
    return jsonify({"message": "User registered", "userId": user.id})


@auth_bp.route('/login', methods=['POST'])
def login():
    data = json_body()
    token, user = catalog.authenticate(
        text_field(data, 'email'),
        text_field(data, 'password', strip=False),
    )
    return jsonify({"token": token, "user": user.to_dict()})


@auth_bp.route('/me')
def me():
    """Return the user the bearer token was issued for."""
    if not current_user.is_authenticated:
        raise Unauthorized("Authentication required")
    return jsonify({"user": current_user.to_dict()})
