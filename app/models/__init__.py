from app.models.models import *
