from models.substitution import Substitution, has_data, COMPARISON_FIELDS
from models.schedule_day import ScheduleDay
from models.schedule import Schedule, ScheduleType
from models.additional_info import AdditionalInfo
from models.natural_order import natural_key

__all__ = [
    "Substitution",
    "has_data",
    "COMPARISON_FIELDS",
    "ScheduleDay",
    "Schedule",
    "ScheduleType",
    "AdditionalInfo",
    "natural_key",
]
