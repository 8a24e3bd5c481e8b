from enum import Enum


STORE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
STORE_TIME_FORMAT = "%H:%M:%S"

class ActivityTypeEnum(str, Enum):
    EXERCISE = "Exercise"
    MEAL = "Meal"
    MEDITATION = "Meditation"
    SLEEP = "Sleep"

ACTIVITY_TYPES = [member.value for member in ActivityTypeEnum]

class NotificationTypeEnum(str, Enum):
    REMINDER = "Reminder"

class ScheduleStatusEnum(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"

TRUE_LITERALS = frozenset({"true", "yes", "y", "1"})
FALSE_LITERALS = frozenset({"false", "no", "n", "0"})

# Largest id the store's 64-bit INTEGER primary keys can hold
MAX_STORE_ID = 2**63 - 1
