# __init__.py
from connectus.models.application import Application
from connectus.models.jobs import Job
from connectus.models.payment import Payment
from connectus.models.user import User

__all__ = [
	"Application",
	"Job",
	"Payment",
	"User",
]
