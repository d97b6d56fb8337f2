"""Fluxo de atendimento de saúde (agendamento, sintomas, receitas)."""

from __future__ import annotations

from guided_chat.domain.enums import BadgeVariant, DomainId, InputFieldType, StepStatus
from guided_chat.domain.flow import Branch, FlowConfig, FlowStep
from guided_chat.domain.models import ProgressStep, SidebarField, SidebarSection
from guided_chat.domain.patches import CompleteAll, SetBadge, UpsertField, ValueTransform
from guided_chat.flows.common import advance_stage, replies, set_field, text_input

PROGRESS: tuple[ProgressStep, ...] = (
    ProgressStep(id="symptoms", label="Symptoms", status=StepStatus.CURRENT),
    ProgressStep(id="history", label="History"),
    ProgressStep(id="schedule", label="Schedule"),
    ProgressStep(id="confirm", label="Confirm"),
)

SIDEBAR: tuple[SidebarSection, ...] = (
    SidebarSection(
        id="patient",
        title="Patient Information",
        icon="user",
        fields=[
            SidebarField(label="Name", value="Not provided"),
            SidebarField(label="Date of Birth", value="Not provided"),
        ],
        default_open=True,
    ),
    SidebarSection(
        id="visit",
        title="Visit Details",
        icon="calendar",
        fields=[
            SidebarField(label="Reason", value="Not selected"),
            SidebarField(label="Appointment", value="Not scheduled"),
        ],
        collapsible=True,
        default_open=True,
    ),
)

STEPS: tuple[FlowStep, ...] = (
    FlowStep(
        id="welcome",
        bot_message=(
            "Hello! I'm your Virtual Healthcare Assistant. I can help you with "
            "appointments, symptom checking, and more."
        ),
        quick_replies=replies(
            ("📅 Schedule Appointment", "Schedule Appointment"),
            ("🩺 Check Symptoms", "Check Symptoms"),
            ("💊 Prescription Refill", "Prescription Refill"),
        ),
        delay_ms=500,
        next=Branch(
            cases={
                "Check Symptoms": "symptom_description",
                "Prescription Refill": "prescription_name",
            },
            default="patient_name",
        ),
        sidebar=(set_field("visit", "Reason"),),
    ),
    FlowStep(
        id="symptom_description",
        bot_message=(
            "🩺 Please describe your symptoms, when they started and how severe they are. "
            "(Minimum 50 characters)"
        ),
        input_field=text_input(
            "symptomDescription",
            "Symptom Description",
            "I have had a persistent cough for three days...",
            kind=InputFieldType.TEXTAREA,
        ),
        delay_ms=1000,
        next="patient_name",
        sidebar=(
            UpsertField(section_id="visit", label="Symptoms", value="Described ✓"),
        ),
    ),
    FlowStep(
        id="prescription_name",
        bot_message="💊 Which medication would you like to refill?",
        input_field=text_input("medication", "Medication", "e.g., Lisinopril 10mg"),
        delay_ms=1000,
        next="patient_name",
        sidebar=(UpsertField(section_id="visit", label="Medication"),),
    ),
    FlowStep(
        id="patient_name",
        bot_message="Please provide your full name.",
        input_field=text_input("patientName", "Full Name", "e.g., Michael Johnson"),
        delay_ms=1000,
        next="patient_dob",
        progress=advance_stage("symptoms", "history"),
        sidebar=(set_field("patient", "Name"),),
    ),
    FlowStep(
        id="patient_dob",
        bot_message="What is your date of birth? (MM/DD/YYYY)",
        # Texto livre: data de nascimento não passa pela regra de datas futuras
        input_field=text_input("patientBirth", "Date of Birth", "e.g., 04/12/1985"),
        delay_ms=1000,
        next="appointment_date",
        sidebar=(set_field("patient", "Date of Birth"),),
    ),
    FlowStep(
        id="appointment_date",
        bot_message="📅 Which date works best for your visit?",
        input_field=text_input(
            "appointmentDate", "Preferred Date", kind=InputFieldType.DATE
        ),
        delay_ms=1000,
        next="complete",
        progress=advance_stage("history", "schedule"),
        sidebar=(set_field("visit", "Appointment", transform=ValueTransform.US_DATE),),
    ),
    FlowStep(
        id="complete",
        bot_message=(
            "✅ Thank you! Your information has been recorded. A healthcare professional "
            "will contact you within 24 hours to schedule your appointment."
        ),
        delay_ms=1500,
        progress=(CompleteAll(),),
        sidebar=(
            SetBadge(section_id="visit", value="REQUESTED", variant=BadgeVariant.SUCCESS),
        ),
    ),
)

FLOW = FlowConfig(domain=DomainId.HEALTHCARE, start_step_id="welcome", steps=STEPS)
