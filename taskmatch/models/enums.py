from enum import Enum


class UserRole(str, Enum):
    VOLUNTEER = "volunteer"
    NGO = "ngo"
    ADMIN = "admin"


class NgoStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class TaskStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskCategory(str, Enum):
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    ENVIRONMENT = "Environment"
    COMMUNITY_SERVICE = "Community Service"
    ANIMAL_WELFARE = "Animal Welfare"
    DISASTER_RELIEF = "Disaster Relief"
    HUMAN_RIGHTS = "Human Rights"
    ARTS_AND_CULTURE = "Arts & Culture"
    SPORTS = "Sports"
    TECHNOLOGY = "Technology"
    OTHER = "Other"


class RecurringPattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ApplicationDecision(str, Enum):
    """Statuses a pending application may be moved to."""

    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Availability(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    FLEXIBLE = "flexible"
