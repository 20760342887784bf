# Fleet Manager: Database Models
# Import all models here for SQLAlchemy discovery

from fleet_manager.models.user import User                               # noqa
from fleet_manager.models.vehicle import Vehicle, MaintenanceRecord      # noqa
from fleet_manager.models.movement import Movement                       # noqa
from fleet_manager.models.reference import (                             # noqa
    Driver, Client, Route, Department, Supervisor,
)
