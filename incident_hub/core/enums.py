from enum import Enum


class UserRole(str, Enum):
    citizen = "Citizen"
    contractor = "Contractor"


class ReportStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"


class LocationSource(str, Enum):
    device = "device"
    network = "network"


class LocationFailure(str, Enum):
    permission_denied = "permission_denied"
    unavailable = "unavailable"
    timeout = "timeout"
    network = "network"


class ProfileSource(str, Enum):
    session = "session"
    fallback = "fallback"
