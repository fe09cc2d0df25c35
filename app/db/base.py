"""
Database base configuration
"""
from sqlalchemy.orm import declarative_base

# Create declarative base for SQLAlchemy models
Base = declarative_base()


# Import all models here to ensure they are registered with SQLAlchemy
def import_models():
    """Import all models to register them with SQLAlchemy"""
    from app.models import account  # noqa: F401
    from app.models import auth_session  # noqa: F401
    from app.models import visa_update  # noqa: F401
    from app.models import feedback  # noqa: F401
    from app.models import user_profile  # noqa: F401
