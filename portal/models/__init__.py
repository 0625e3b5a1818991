"""SQLAlchemy ORM models for the service portal.

All models are exported from this module for convenient imports:
    from portal.models import ServiceRequest, ProjectManager, ...

Models are organized by domain:
- otp_verification.py: OtpVerification (PM login codes)
- project_manager.py: ProjectManager
- service_request.py: ServiceRequest
- service.py: Service (public catalog)
- profile.py: Profile (customer display data)
"""

from portal.models.base import Base, TimestampMixin
from portal.models.otp_verification import OtpVerification
from portal.models.profile import Profile
from portal.models.project_manager import ProjectManager
from portal.models.service import Service
from portal.models.service_request import SERVICE_REQUEST_STATUSES, ServiceRequest

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    # Auth
    "OtpVerification",
    # Directory
    "ProjectManager",
    "Profile",
    # Catalog and work
    "Service",
    "ServiceRequest",
    "SERVICE_REQUEST_STATUSES",
]
