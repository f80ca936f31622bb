from .user import User
from .company import Company
from .job import Job
from .application import Application
