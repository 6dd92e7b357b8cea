"""
Admin dashboard route.
"""
from fastapi import APIRouter, Depends
from pymongo.database import Database

from vehicle_service.auth import require_admin
from vehicle_service.database import get_db
from vehicle_service.models.emergency import EmergencyRequest, EmergencyStatus
from vehicle_service.models.inventory import InventoryItem
from vehicle_service.models.user import User
from vehicle_service.models.vehicle_error import ErrorStatus, VehicleError
from vehicle_service.models.vehicle_registration import RegistrationStatus, VehicleRegistration

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _count_by_status(collection, statuses) -> dict:
    return {s.value: collection.count_documents({"status": s.value}) for s in statuses}


@router.get("/")
def get_dashboard(
    db: Database = Depends(get_db),
    current_user: dict = Depends(require_admin)
):
    """
    Get dashboard statistics.
    """
    emergencies = EmergencyRequest.collection(db)
    registrations = VehicleRegistration.collection(db)
    errors = VehicleError.collection(db)
    inventory = InventoryItem.collection(db)

    return {
        "total_users": User.collection(db).count_documents({}),
        "total_emergencies": emergencies.count_documents({}),
        "emergencies_by_status": _count_by_status(emergencies, EmergencyStatus),
        "total_inventory_items": inventory.count_documents({}),
        "out_of_stock_items": inventory.count_documents({"product_quantity": 0}),
        "total_vehicle_registrations": registrations.count_documents({}),
        "registrations_by_status": _count_by_status(registrations, RegistrationStatus),
        "total_vehicle_errors": errors.count_documents({}),
        "pending_vehicle_errors": errors.count_documents({"status": ErrorStatus.PENDING.value}),
    }
