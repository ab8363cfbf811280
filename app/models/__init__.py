# app/models/__init__.py
from app.models.customer_models import Customer, CustomerRelationship
from app.models.user_models import User
