from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

DAY_OFF_TIME = "00:00"


class WeeklySchedule(SQLModel, table=True):
    """Recurring working window of one employee for one weekday (1=Monday .. 7=Sunday)."""

    __tablename__ = "employee_schedules"
    __table_args__ = (
        UniqueConstraint("employee_id", "weekday", name="uq_employee_schedules_employee_weekday"),
    )
    id: int | None = Field(default=None, primary_key=True)
    employee_id: int = Field(foreign_key="users.id", index=True)
    business_id: int = Field(foreign_key="businesses.id", index=True)
    weekday: int
    open_time: str = DAY_OFF_TIME
    close_time: str = DAY_OFF_TIME
    is_day_off: bool = False


class WeeklySchedulePublic(SQLModel):
    id: int
    employee_id: int
    weekday: int
    open_time: str
    close_time: str
    is_day_off: bool
