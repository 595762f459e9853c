# sitecms/admin/__init__.py
from flask import Blueprint

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

# Only import routes after blueprint creation
from . import routes
