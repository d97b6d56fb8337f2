"""Fluxo de reservas de viagem (voo, hotel e pacote).

A escolha inicial troca a sidebar inteira pelo template do tipo de reserva.
O tipo de viagem (só ida / ida e volta) fica no scratch da conversa e decide
se a data de volta é coletada.
"""

from __future__ import annotations

from guided_chat.domain.enums import BadgeVariant, DomainId, InputFieldType, StepStatus
from guided_chat.domain.flow import Branch, FlowConfig, FlowStep
from guided_chat.domain.models import ProgressStep, SidebarField, SidebarSection
from guided_chat.domain.patches import (
    CompleteAll,
    Condition,
    RemoveField,
    ReplaceFields,
    ReplaceSections,
    SetBadge,
    SetStatus,
    UpsertField,
    ValueTransform,
)
from guided_chat.flows.common import advance_stage, replies, set_field, text_input

TRIP_TYPE_KEY = "trip_type"
ONE_WAY = "One-way"
ROUND_TRIP = "Round-trip"

PROGRESS: tuple[ProgressStep, ...] = (
    ProgressStep(id="search", label="Search", status=StepStatus.CURRENT),
    ProgressStep(id="select", label="Select"),
    ProgressStep(id="details", label="Details"),
    ProgressStep(id="payment", label="Payment"),
    ProgressStep(id="confirm", label="Confirm"),
)


def _section(
    section_id: str,
    title: str,
    icon: str,
    fields: list[tuple[str, str]],
    *,
    collapsible: bool | None = True,
    default_open: bool = False,
    bold_last: bool = False,
) -> SidebarSection:
    items = [SidebarField(label=label, value=value) for label, value in fields]
    if bold_last and items:
        items[-1] = items[-1].model_copy(update={"bold": True})
    return SidebarSection(
        id=section_id,
        title=title,
        icon=icon,
        fields=items,
        collapsible=collapsible,
        default_open=default_open,
    )


# Sidebar antes da escolha do tipo de reserva
SIDEBAR: tuple[SidebarSection, ...] = (
    _section(
        "trip",
        "Trip Details",
        "plane",
        [
            ("Booking Type", "Not selected"),
            ("From", "Not provided"),
            ("To", "Not provided"),
            ("Trip Type", "Not selected"),
            ("Departure Date", "Not selected"),
            ("Return Date", "Not selected"),
            ("Passengers", "Not specified"),
            ("Cabin Class", "Not selected"),
        ],
    ),
    _section(
        "flight",
        "Flight Information",
        "calendar",
        [
            ("Airline", "Not selected"),
            ("Flight Number", "Pending"),
            ("Departure", "TBD"),
            ("Arrival", "TBD"),
        ],
    ),
    _section(
        "passenger",
        "Passenger Information",
        "user",
        [
            ("Full Name", "Not provided"),
            ("ID Type", "Not selected"),
            ("TSA Status", "Pending verification"),
            ("Email", "Not provided"),
        ],
    ),
    _section("services", "Additional Services", "briefcase", []),
    _section(
        "payment",
        "Fare Summary",
        "dollar-sign",
        [("Base Fare", "TBD"), ("Taxes & Fees", "TBD"), ("Total", "TBD")],
    ),
    _section(
        "confirmation",
        "Booking Confirmation",
        "check-circle",
        [("Booking Reference", "Pending"), ("Status", "In Progress")],
    ),
)

HOTEL_SIDEBAR: tuple[SidebarSection, ...] = (
    _section(
        "hotel-details",
        "Hotel Booking Details",
        "home",
        [
            ("Booking Type", "Hotel"),
            ("Destination / City", "Not provided"),
            ("Check-in Date", "Not selected"),
            ("Check-out Date", "Not selected"),
            ("Guests", "Not specified"),
            ("Rooms", "Not specified"),
        ],
        collapsible=None,
        default_open=True,
    ),
    _section(
        "hotel-info",
        "Hotel Information",
        "building",
        [
            ("Hotel Name", "Not selected"),
            ("Room Type", "Not selected"),
            ("Star Rating", "TBD"),
            ("Amenities", "TBD"),
        ],
    ),
    _section(
        "hotel-guest",
        "Guest Information",
        "user",
        [
            ("Guest Name", "Not provided"),
            ("Email", "Not provided"),
            ("Phone", "Not provided"),
            ("Special Requests", "None"),
        ],
    ),
    _section(
        "hotel-payment",
        "Pricing Summary",
        "dollar-sign",
        [
            ("Room Rate (per night)", "TBD"),
            ("Number of Nights", "TBD"),
            ("Taxes & Fees", "TBD"),
            ("Total", "TBD"),
        ],
        bold_last=True,
    ),
    _section(
        "hotel-confirmation",
        "Booking Confirmation",
        "check-circle",
        [("Confirmation Number", "Pending"), ("Status", "In Progress")],
    ),
)

FLIGHT_SIDEBAR: tuple[SidebarSection, ...] = (
    _section(
        "trip",
        "Flight Details",
        "plane",
        [
            ("Booking Type", "Flight"),
            ("From", "Not provided"),
            ("To", "Not provided"),
            ("Trip Type", "Not selected"),
            ("Departure Date", "Not selected"),
            ("Return Date", "Not selected"),
            ("Passengers", "Not specified"),
            ("Cabin Class", "Not selected"),
        ],
        collapsible=None,
        default_open=True,
    ),
    _section(
        "flight",
        "Flight Information",
        "calendar",
        [
            ("Airline", "Not selected"),
            ("Flight Number", "Pending"),
            ("Departure Time", "TBD"),
            ("Arrival Time", "TBD"),
        ],
    ),
    _section(
        "passenger",
        "Passenger Information",
        "user",
        [
            ("Full Name", "Not provided"),
            ("ID Type", "Not selected"),
            ("TSA Status", "Pending verification"),
            ("Email", "Not provided"),
        ],
    ),
    _section("services", "Additional Services", "briefcase", []),
    _section(
        "payment",
        "Fare Summary",
        "dollar-sign",
        [("Base Fare", "TBD"), ("Taxes & Fees", "TBD"), ("Total", "TBD")],
        bold_last=True,
    ),
    _section(
        "confirmation",
        "Booking Confirmation",
        "check-circle",
        [("Booking Reference", "Pending"), ("Status", "In Progress")],
    ),
)

PACKAGE_SIDEBAR: tuple[SidebarSection, ...] = (
    _section(
        "package-overview",
        "Package Deal Overview",
        "package",
        [
            ("Booking Type", "Package Deal"),
            ("Destination", "Not provided"),
            ("Travel Dates", "Not selected"),
            ("Travelers", "Not specified"),
        ],
        collapsible=None,
        default_open=True,
    ),
    _section(
        "package-flight",
        "Flight Details",
        "plane",
        [
            ("From", "Not provided"),
            ("To", "Not provided"),
            ("Departure Date", "Not selected"),
            ("Return Date", "Not selected"),
            ("Passengers", "Not specified"),
            ("Cabin Class", "Not selected"),
        ],
        default_open=True,
    ),
    _section(
        "package-hotel",
        "Hotel Details",
        "home",
        [
            ("Hotel Location", "Not selected"),
            ("Check-in", "Not selected"),
            ("Check-out", "Not selected"),
            ("Rooms", "Not specified"),
            ("Room Type", "Not selected"),
        ],
        default_open=True,
    ),
    _section(
        "package-traveler",
        "Traveler Information",
        "user",
        [
            ("Lead Traveler", "Not provided"),
            ("Email", "Not provided"),
            ("Phone", "Not provided"),
        ],
    ),
    _section(
        "package-payment",
        "Package Pricing",
        "dollar-sign",
        [
            ("Flight Cost", "TBD"),
            ("Hotel Cost", "TBD"),
            ("Package Discount", "TBD"),
            ("Total", "TBD"),
        ],
        bold_last=True,
    ),
    _section(
        "package-confirmation",
        "Booking Confirmation",
        "check-circle",
        [("Package Reference", "Pending"), ("Status", "In Progress")],
    ),
)

SIDEBAR_TEMPLATES: dict[str, tuple[SidebarSection, ...]] = {
    "hotel": HOTEL_SIDEBAR,
    "flight": FLIGHT_SIDEBAR,
    "package": PACKAGE_SIDEBAR,
}

SELECTED_FLIGHT_FIELDS = (
    SidebarField(label="Airline", value="United Airlines"),
    SidebarField(label="Flight Number", value="UA 1234"),
    SidebarField(label="Departure", value="10:30 AM ET"),
    SidebarField(label="Arrival", value="1:45 PM PT"),
)

FARE_FIELDS = (
    SidebarField(label="Base Fare", value="$315.00"),
    SidebarField(label="Taxes & Fees", value="$35.00"),
    SidebarField(label="Total", value="$350.00", bold=True, highlight=True),
)

CONFIRMATION_FIELDS = (
    SidebarField(label="Booking Reference", value="BK7X9M2P", bold=True),
    SidebarField(label="Status", value="✅ Confirmed", highlight=True),
    SidebarField(label="E-Ticket", value="#016-2358743219"),
    SidebarField(label="Confirmation Sent", value="Yes"),
)

_ONE_WAY = Condition(scratch_equals={TRIP_TYPE_KEY: ONE_WAY})

STEPS: tuple[FlowStep, ...] = (
    FlowStep(
        id="welcome",
        bot_message=(
            "Hi! I'm your Virtual Booking Assistant. "
            "Let me help you find the perfect stay or flight!"
        ),
        quick_replies=replies(
            ("🏨 Book Hotel", "hotel"),
            ("✈️ Book Flight", "flight"),
            ("📦 Package Deal", "package"),
            is_primary_action=True,
        ),
        delay_ms=500,
        next=Branch(cases={"flight": "departure_city"}, default="hotel_destination"),
        sidebar=(ReplaceSections(templates=SIDEBAR_TEMPLATES, fallback="flight"),),
    ),
    # Voo
    FlowStep(
        id="departure_city",
        bot_message="Where will you be departing from?",
        input_field=text_input("departureCity", "Departure City", "e.g., New York"),
        delay_ms=800,
        next="destination_city",
        progress=(SetStatus(step_id="search", status=StepStatus.CURRENT),),
        sidebar=(set_field("trip", "From", transform=ValueTransform.CITY_CODE),),
    ),
    FlowStep(
        id="destination_city",
        bot_message="Where would you like to fly to?",
        input_field=text_input("destinationCity", "Destination City", "e.g., Los Angeles"),
        delay_ms=800,
        next="trip_type",
        sidebar=(set_field("trip", "To", transform=ValueTransform.CITY_CODE),),
    ),
    FlowStep(
        id="trip_type",
        bot_message="Is this a one-way or round-trip flight?",
        quick_replies=replies(
            (ONE_WAY, ONE_WAY),
            (ROUND_TRIP, ROUND_TRIP),
            exclusive_group="trip-type",
        ),
        delay_ms=800,
        next="departure_date",
        remember=TRIP_TYPE_KEY,
        sidebar=(UpsertField(section_id="trip", label="Trip Type"),),
    ),
    FlowStep(
        id="departure_date",
        bot_message="What date would you like to travel?",
        input_field=text_input("departureDate", "Departure Date", kind=InputFieldType.DATE),
        delay_ms=800,
        next=Branch(
            scratch_key=TRIP_TYPE_KEY,
            cases={ONE_WAY: "passenger_count"},
            default="return_date",
        ),
        sidebar=(
            RemoveField(section_id="trip", label="Return Date", when=_ONE_WAY),
            set_field("trip", "Departure Date", transform=ValueTransform.US_DATE),
        ),
    ),
    FlowStep(
        id="return_date",
        bot_message="What date would you like to return?",
        input_field=text_input("returnDate", "Return Date", kind=InputFieldType.DATE),
        delay_ms=800,
        next="passenger_count",
        sidebar=(set_field("trip", "Return Date", transform=ValueTransform.US_DATE),),
    ),
    FlowStep(
        id="passenger_count",
        bot_message="How many passengers will be traveling?",
        quick_replies=replies(
            ("1 Adult", "1"),
            ("2 Adults", "2"),
            ("3 Adults", "3"),
            ("4+ Travelers", "4+"),
        ),
        delay_ms=800,
        next="cabin_class",
        progress=advance_stage("search", "select"),
        sidebar=(set_field("trip", "Passengers", template="{value} Adult(s)"),),
    ),
    FlowStep(
        id="cabin_class",
        bot_message=(
            "Which cabin class would you prefer—Economy, Premium Economy, "
            "Business, or First Class?"
        ),
        quick_replies=replies(
            ("Economy", "Economy"),
            ("Premium Economy", "Premium Economy"),
            ("Business", "Business"),
            ("First Class", "First Class"),
        ),
        delay_ms=800,
        next="preferences",
        sidebar=(set_field("trip", "Cabin Class"),),
    ),
    FlowStep(
        id="preferences",
        bot_message=(
            "Do you have any preferences, such as nonstop flights or a preferred airline?"
        ),
        input_field=text_input(
            "preferences",
            "Preferences",
            "e.g., Nonstop only, Delta preferred",
            required=False,
        ),
        delay_ms=800,
        next="flight_selection",
        sidebar=(
            UpsertField(
                section_id="trip", label="Preferences", when=Condition(value_present=True)
            ),
        ),
    ),
    FlowStep(
        id="flight_selection",
        bot_message=(
            "I've found flight options that match your preferences. "
            "Would you like to proceed with this selection?"
        ),
        quick_replies=replies(("Yes, proceed", "yes"), ("See other options", "no")),
        delay_ms=1200,
        next="passenger_name",
        progress=advance_stage("select", "details"),
        sidebar=(
            ReplaceFields(
                section_id="flight",
                fields=SELECTED_FLIGHT_FIELDS,
                when=Condition(value_in=("yes",)),
            ),
        ),
    ),
    FlowStep(
        id="passenger_name",
        bot_message=(
            "Please provide the full name of the primary passenger as it appears "
            "on their government-issued ID."
        ),
        input_field=text_input("passengerName", "Full Name", "e.g., John Michael Smith"),
        delay_ms=800,
        next="government_id",
        sidebar=(set_field("passenger", "Full Name"),),
    ),
    FlowStep(
        id="government_id",
        bot_message="Will you be using a U.S. driver's license or a passport for this trip?",
        quick_replies=replies(
            ("Driver's License", "Driver's License"),
            ("Passport", "Passport"),
        ),
        delay_ms=800,
        next="contact_email",
        sidebar=(
            set_field("passenger", "ID Type"),
            set_field("passenger", "TSA Status", value="✅ Secure Flight Approved"),
        ),
    ),
    FlowStep(
        id="contact_email",
        bot_message="What email address should I use to send your booking confirmation?",
        input_field=text_input(
            "contactEmail",
            "Email Address",
            "e.g., john.smith@email.com",
            kind=InputFieldType.EMAIL,
        ),
        delay_ms=800,
        next="seat_baggage",
        sidebar=(set_field("passenger", "Email"),),
    ),
    FlowStep(
        id="seat_baggage",
        bot_message="Would you like to select a seat or add checked baggage?",
        quick_replies=replies(
            ("Select seat", "seat"),
            ("Add baggage", "baggage"),
            ("Both", "both"),
            ("Skip for now", "skip"),
        ),
        delay_ms=800,
        next="fare_summary",
        progress=advance_stage("details", "payment"),
        sidebar=(
            UpsertField(
                section_id="services",
                label="Seat",
                value="14A (Window)",
                when=Condition(value_in=("seat", "both")),
            ),
            UpsertField(
                section_id="services",
                label="Checked Bags",
                value="1 bag ($35.00)",
                when=Condition(value_in=("baggage", "both")),
            ),
        ),
    ),
    FlowStep(
        id="fare_summary",
        bot_message="The total fare is $350.00. Would you like to proceed to payment?",
        quick_replies=replies(("Proceed to payment", "yes"), ("Review details", "review")),
        delay_ms=1000,
        next="booking_confirmation",
        sidebar=(
            SetBadge(section_id="payment", value="Pending", variant=BadgeVariant.WARNING),
            ReplaceFields(section_id="payment", fields=FARE_FIELDS),
            UpsertField(
                section_id="payment",
                label="Payment Status",
                value_map={"yes": "Processing..."},
                default="Pending",
            ),
        ),
    ),
    FlowStep(
        id="booking_confirmation",
        bot_message=(
            "✅ Your flight has been successfully booked! A confirmation email has been "
            "sent with your booking reference and e-ticket."
        ),
        delay_ms=1500,
        progress=(CompleteAll(),),
        sidebar=(
            SetBadge(section_id="payment", value="Confirmed", variant=BadgeVariant.SUCCESS),
            set_field("payment", "Payment Status", value="✅ Confirmed"),
            ReplaceFields(section_id="confirmation", fields=CONFIRMATION_FIELDS),
        ),
    ),
    # Hotel (também usado por pacotes)
    FlowStep(
        id="hotel_destination",
        bot_message="Great choice! Where would you like to stay?",
        input_field=text_input("destination", "Destination", "e.g., Miami, FL"),
        delay_ms=1000,
        next="hotel_checkin_date",
        sidebar=(set_field("hotel-details", "Destination / City"),),
    ),
    FlowStep(
        id="hotel_checkin_date",
        bot_message="When would you like to check in?",
        input_field=text_input("checkinDate", "Check-in Date", kind=InputFieldType.DATE),
        delay_ms=1000,
        next="hotel_checkout_date",
        sidebar=(set_field("hotel-details", "Check-in Date", transform=ValueTransform.US_DATE),),
    ),
    FlowStep(
        id="hotel_checkout_date",
        bot_message="And when would you like to check out?",
        input_field=text_input("checkoutDate", "Check-out Date", kind=InputFieldType.DATE),
        delay_ms=1000,
        next="hotel_complete",
        sidebar=(
            set_field("hotel-details", "Check-out Date", transform=ValueTransform.US_DATE),
        ),
    ),
    FlowStep(
        id="hotel_complete",
        bot_message=(
            "🎉 Perfect! I found several great hotel options for you. Your booking details "
            "have been saved and you will receive recommendations shortly!"
        ),
        delay_ms=1500,
        progress=(CompleteAll(),),
    ),
)

FLOW = FlowConfig(domain=DomainId.BOOKING, start_step_id="welcome", steps=STEPS)
