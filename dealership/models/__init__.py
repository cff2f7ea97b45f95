# Exposes all models to the app
from .users import Dealership, Role, User, UserToken
from .vehicles import VehicleCategory, Vehicle, Customer
from .operations import RepairStatus, ProposalStatus, RepairOrder, SaleProposal, Sale
