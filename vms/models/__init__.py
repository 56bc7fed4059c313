# Visitor Management — Database Models
# Import all models here for SQLAlchemy discovery

from vms.models.visitor import Visitor       # noqa
from vms.models.approval import Approval     # noqa
