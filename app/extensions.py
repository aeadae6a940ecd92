"""Flask extensions initialization."""

from flask_sqlalchemy import SQLAlchemy

# Initialize extensions
db = SQLAlchemy()
