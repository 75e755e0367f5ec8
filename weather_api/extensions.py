"""
Flask Extensions

Callers are identified by an opaque authentication key sent with every
request; Flask-Login resolves it through a request loader, no session
cookie is ever issued.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Database instance
db = SQLAlchemy()

# Login manager resolving callers from the authentication key header
login_manager = LoginManager()
