from enum import Enum


class Permission(str, Enum):
    NONE = "none"
    VIEW = "view"
    EDIT = "edit"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EXCUSED = "excused"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class NotificationType(str, Enum):
    ATTENDANCE = "attendance"
    LEAVE = "leave"
    EVENT = "event"
    GRADE = "grade"
    MESSAGE = "message"


class Relationship(str, Enum):
    FATHER = "father"
    MOTHER = "mother"
    GUARDIAN = "guardian"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
