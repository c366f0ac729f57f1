from enum import StrEnum

SERVICE_SELF = "dcm"
DEFAULT_BRANCH = "master"


class Label(StrEnum):
    REPOSITORY = "dcm.repository"
    BRANCH = "dcm.branch"
    INITSCRIPT = "dcm.initscript"
    UPDATEABLE = "dcm.updateable"
