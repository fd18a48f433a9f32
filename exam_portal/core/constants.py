from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    STUDENT = "student"

class OptionKeyEnum(str, Enum):
    OPTION1 = "option1"
    OPTION2 = "option2"
    OPTION3 = "option3"
    OPTION4 = "option4"

class ExamSessionStatusEnum(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
