# CarIT: Database Models
# Import all models here for SQLAlchemy discovery

from carit.models.user import User                         # noqa
from carit.models.catalog_vehicle import CatalogVehicle    # noqa
from carit.models.garage_vehicle import GarageVehicle      # noqa
