from pydantic import BaseModel, Field

from salon_booking.domain.entities.booking_intent import BookingType


class LoginRequestSchema(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupRequestSchema(BaseModel):
    first_name: str
    last_name: str
    email: str = Field(min_length=1)
    phone: str
    password: str = Field(min_length=1)
    confirm_password: str


class AuthResponseSchema(BaseModel):
    authenticated: bool
    role: str | None = None
    next_page: str


class ServiceSchema(BaseModel):
    id: str
    name: str
    price: float
    duration: int
    category: str | None = None
    description: str | None = None


class IntentRequestSchema(BaseModel):
    booking_type: BookingType
    service_id: str | None = None
    package_id: str | None = None
    name: str | None = None
    price: float = 0
    duration: int | None = None


class IntentSchema(BaseModel):
    booking_type: BookingType
    service_id: str | None = None
    package_id: str | None = None
    name: str
    price: float
    duration: int | None = None


class IntentResponseSchema(BaseModel):
    intent: IntentSchema
    next_page: str


class DateRequestSchema(BaseModel):
    date: str


class TimeRequestSchema(BaseModel):
    time: str


class StylistRequestSchema(BaseModel):
    stylist_id: str


class CustomerInfoSchema(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""


class CustomerInfoRequestSchema(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None


class CalendarDaySchema(BaseModel):
    date: str
    day: int
    weekday: str
    is_today: bool


class StylistSchema(BaseModel):
    id: str
    name: str
    specialty: str | None = None
    rating: float | None = None


class TimeSlotSchema(BaseModel):
    id: str
    day_of_week: str
    start_time: str
    end_time: str
    duration: int
    available: bool


class ConfirmationSchema(BaseModel):
    service_name: str
    date: str
    day: str
    time: str
    end_time: str | None = None
    stylist_name: str | None = None
    total_price: float
    booking_id: str | None = None


class WizardResponseSchema(BaseModel):
    step: int
    selected_date: str | None = None
    selected_day: str | None = None
    selected_time: str | None = None
    selected_stylist_id: str | None = None
    customer_info: CustomerInfoSchema
    intent: IntentSchema
    calendar: list[CalendarDaySchema] = Field(default_factory=list)
    stylists: list[StylistSchema] = Field(default_factory=list)
    stylists_loading: bool = False
    stylist_error: str | None = None
    time_slots: list[TimeSlotSchema] = Field(default_factory=list)
    slots_loading: bool = False
    slots_notice: str | None = None
    error_message: str | None = None
    checking: bool = False
    creating: bool = False
    can_proceed: bool = False
    confirmation: ConfirmationSchema | None = None
    exit_pages: list[str] = Field(default_factory=list)


class PreviousResponseSchema(BaseModel):
    page: str
    wizard: WizardResponseSchema


class ReviewRequestSchema(BaseModel):
    booking_id: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    recommend: bool = True


class ReviewResponseSchema(BaseModel):
    review_id: str | None = None
    message: str = "Review submitted successfully!"


class TimeSlotCreateSchema(BaseModel):
    day_of_week: str
    start_time: str
    end_time: str | None = None
    duration: int = 60


class AdminTimeSlotsSchema(BaseModel):
    days: dict[str, list[TimeSlotSchema]]


class TimeSlotToggleSchema(BaseModel):
    id: str
    available: bool


class SuccessSchema(BaseModel):
    success: bool = True
