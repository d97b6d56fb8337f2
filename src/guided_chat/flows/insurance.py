"""Fluxo de abertura de sinistro (seguro auto).

Cinco estágios: verificação da apólice, detalhes do incidente, avaliação de
danos, documentação e preferências de liquidação.
"""

from __future__ import annotations

from guided_chat.domain.enums import BadgeVariant, DomainId, InputFieldType, StepStatus
from guided_chat.domain.flow import Branch, FlowConfig, FlowStep
from guided_chat.domain.models import ProgressStep, SidebarBadge, SidebarField, SidebarSection
from guided_chat.domain.patches import (
    CompleteAll,
    ReplaceFields,
    SetBadge,
    SetField,
    ValueTransform,
)
from guided_chat.flows.common import advance_stage, replies, set_field, text_input, yes_no

BRAND_NAME = "Umbrella Insurance"
BRAND_TAGLINE = "Virtual Claims Assistant"
CLAIM_ID = "CLM-8447024"

PROGRESS: tuple[ProgressStep, ...] = (
    ProgressStep(
        id="policy_verification",
        label="Policy Verification",
        sublabel="Identity Check",
        status=StepStatus.CURRENT,
    ),
    ProgressStep(id="incident_details", label="Incident Details", sublabel="What Happened"),
    ProgressStep(
        id="vehicle_damage_assessment", label="Damage Assessment", sublabel="Vehicle Details"
    ),
    ProgressStep(id="documentation", label="Documentation", sublabel="Upload Files"),
    ProgressStep(id="cost_estimation", label="Cost Estimation", sublabel="Repair Costs"),
    ProgressStep(id="settlement_preferences", label="Settlement", sublabel="Payment Info"),
)

NOT_PROVIDED = "Not provided"

SIDEBAR: tuple[SidebarSection, ...] = (
    SidebarSection(
        id="claim_summary",
        title="Claim Summary",
        icon="file-text",
        badge=SidebarBadge(label="IN PROGRESS", variant=BadgeVariant.WARNING),
        fields=[
            SidebarField(label="Claim ID", value=CLAIM_ID),
            SidebarField(label="Policy Number", value=NOT_PROVIDED, editable=False),
            SidebarField(label="Policy Holder", value=NOT_PROVIDED),
            SidebarField(label="Incident Date", value=NOT_PROVIDED),
            SidebarField(label="Incident Type", value=NOT_PROVIDED),
            SidebarField(label="Filed On", value=NOT_PROVIDED),
        ],
        collapsible=True,
        default_open=True,
    ),
    SidebarSection(
        id="damage_assessment",
        title="Damage Assessment",
        icon="clipboard",
        badge=SidebarBadge(label="PENDING", variant=BadgeVariant.DEFAULT),
        fields=[
            SidebarField(label="Vehicle", value=NOT_PROVIDED),
            SidebarField(label="Severity", value="Not assessed"),
            SidebarField(label="Drivable", value="Unknown"),
            SidebarField(label="Damaged Areas", value="Not specified"),
        ],
        collapsible=True,
        default_open=True,
    ),
    SidebarSection(
        id="cost_breakdown",
        title="Cost Breakdown",
        icon="dollar-sign",
        fields=[
            SidebarField(label="Parts", value="$0.00"),
            SidebarField(label="Labor", value="$0.00"),
            SidebarField(label="Paint/Refinish", value="$0.00"),
            SidebarField(label="Other Costs", value="$0.00"),
            SidebarField(label="Subtotal", value="$0.00", bold=True),
            SidebarField(label="Deductible", value="-$500.00"),
            SidebarField(label="Total Payout", value="$0.00", bold=True, highlight=True),
        ],
        collapsible=True,
        default_open=True,
    ),
    SidebarSection(
        id="timeline_status",
        title="Timeline & Status",
        icon="clock",
        fields=[
            SidebarField(label="Current Stage", value="Policy Verification"),
            SidebarField(label="Est. Completion", value="Not available"),
            SidebarField(label="Est. Repair Time", value="Not available"),
            SidebarField(label="Next Action", value="Complete verification"),
        ],
        collapsible=True,
        default_open=True,
    ),
    SidebarSection(
        id="documentation_status",
        title="Documentation",
        icon="paperclip",
        fields=[
            SidebarField(label="Photos", value="0 uploaded"),
            SidebarField(label="Police Report", value=NOT_PROVIDED),
            SidebarField(label="Repair Estimate", value=NOT_PROVIDED),
            SidebarField(label="Other Documents", value="0 uploaded"),
        ],
        collapsible=True,
        default_open=False,
    ),
    SidebarSection(
        id="contact_info",
        title="Contact Information",
        icon="user",
        fields=[
            SidebarField(label="Email", value=NOT_PROVIDED),
            SidebarField(label="Phone", value=NOT_PROVIDED),
            SidebarField(label="Preferred Method", value="Not selected"),
        ],
        collapsible=True,
        default_open=False,
    ),
)

# Aplicado na criação da conversa com a data corrente
CREATION_PATCHES = (
    set_field("claim_summary", "Filed On", transform=ValueTransform.US_DATE),
)

COST_ESTIMATE_FIELDS = (
    SidebarField(label="Parts", value="$2,450.00"),
    SidebarField(label="Labor", value="$1,800.00"),
    SidebarField(label="Paint/Refinish", value="$950.00"),
    SidebarField(label="Other Costs", value="$280.00"),
    SidebarField(label="Subtotal", value="$5,480.00", bold=True),
    SidebarField(label="Deductible", value="-$500.00"),
    SidebarField(label="Total Payout", value="$4,980.00", bold=True, highlight=True),
)


def _current_stage(label: str) -> tuple[SetField, ...]:
    return (set_field("timeline_status", "Current Stage", value=label),)


STEPS: tuple[FlowStep, ...] = (
    FlowStep(
        id="welcome",
        bot_message=(
            f"👋 Welcome to {BRAND_NAME}!\n\n"
            f"I'm your {BRAND_TAGLINE}. I'm here to guide you through the claims process "
            "step by step. This should take about 10-15 minutes.\n\n"
            "Let's get started by verifying your policy information."
        ),
        delay_ms=500,
        next="policy_number",
    ),
    # Estágio 1: verificação da apólice
    FlowStep(
        id="policy_number",
        bot_message="🔐 **Policy Verification**\n\nWhat is your policy number? (8-10 digits)",
        input_field=text_input(
            "policyNumber",
            "Policy Number",
            "Enter 8-10 digit policy number (e.g., 887654321)",
        ),
        delay_ms=800,
        next="policy_holder_name",
        sidebar=(set_field("claim_summary", "Policy Number"),),
    ),
    FlowStep(
        id="policy_holder_name",
        bot_message=(
            "✅ Policy found! Your coverage is active.\n\n"
            "For verification, please confirm the policy holder's full name "
            "as it appears on the policy."
        ),
        input_field=text_input(
            "policyHolderName", "Full Name", "Enter full name (e.g., John Michael Doe)"
        ),
        delay_ms=1000,
        next="policy_holder_email",
        sidebar=(set_field("claim_summary", "Policy Holder"),),
    ),
    FlowStep(
        id="policy_holder_email",
        bot_message="📧 What email address should we use for claim updates and notifications?",
        input_field=text_input(
            "policyHolderEmail",
            "Email Address",
            "your.email@example.com",
            kind=InputFieldType.EMAIL,
        ),
        delay_ms=1000,
        next="policy_holder_phone",
        sidebar=(set_field("contact_info", "Email"),),
    ),
    FlowStep(
        id="policy_holder_phone",
        bot_message="📱 Please provide your phone number for urgent updates.",
        input_field=text_input(
            "policyHolderPhone", "Phone Number", "(555) 123-4567", kind=InputFieldType.TEL
        ),
        delay_ms=1000,
        next="verification_complete",
        sidebar=(set_field("contact_info", "Phone"),),
    ),
    FlowStep(
        id="verification_complete",
        bot_message=(
            "✅ **Verification Complete!**\n\n"
            "Your identity has been confirmed. Now let's gather details about the incident."
        ),
        delay_ms=1200,
        next="incident_type",
        progress=advance_stage("policy_verification", "incident_details"),
        sidebar=_current_stage("Incident Details"),
    ),
    # Estágio 2: detalhes do incidente
    FlowStep(
        id="incident_type",
        bot_message="📋 **Incident Details**\n\nWhat type of incident are you reporting?",
        quick_replies=replies(
            ("🚗 Vehicle Accident", "Vehicle Accident"),
            ("🔒 Theft", "Theft"),
            ("🌪️ Natural Disaster", "Natural Disaster"),
            ("🎨 Vandalism", "Vandalism"),
            ("🔥 Fire Damage", "Fire Damage"),
            ("💧 Water Damage", "Water Damage"),
        ),
        delay_ms=1000,
        next="incident_date",
        sidebar=(set_field("claim_summary", "Incident Type"),),
    ),
    FlowStep(
        id="incident_date",
        bot_message="📅 When did this incident occur? Please select the date.",
        input_field=text_input("incidentDate", "Incident Date", kind=InputFieldType.DATE),
        delay_ms=1000,
        next="incident_location",
        sidebar=(set_field("claim_summary", "Incident Date"),),
    ),
    FlowStep(
        id="incident_location",
        bot_message=(
            "📍 Where did the incident take place? Please provide the full address or location."
        ),
        input_field=text_input(
            "incidentLocation", "Location", "e.g., 123 Maple Ave, Springfield, IL 62701"
        ),
        delay_ms=1000,
        next="incident_description",
    ),
    FlowStep(
        id="incident_description",
        bot_message=(
            "📝 Please describe what happened in detail. Include:\n"
            "• What you were doing before the incident\n"
            "• Exactly what happened\n"
            "• Weather and road conditions\n"
            "• Any other relevant details\n\n"
            "(Minimum 50 characters)"
        ),
        input_field=text_input(
            "incidentDescription",
            "Incident Description",
            "I was driving southbound on Main Street when...",
            kind=InputFieldType.TEXTAREA,
        ),
        delay_ms=1000,
        next="injuries_question",
    ),
    FlowStep(
        id="injuries_question",
        bot_message="🏥 Were there any injuries reported as a result of this incident?",
        quick_replies=yes_no(),
        delay_ms=1000,
        next=Branch(cases={"Yes": "injury_severity"}, default="other_parties_question"),
    ),
    FlowStep(
        id="injury_severity",
        bot_message="🩺 How severe were the injuries?",
        quick_replies=replies(
            ("Minor (First aid only)", "Minor"),
            ("Moderate (Medical attention)", "Moderate"),
            ("Severe (Hospitalization)", "Severe"),
        ),
        delay_ms=1000,
        next="other_parties_question",
    ),
    FlowStep(
        id="other_parties_question",
        bot_message=(
            "👥 Were there any other parties (people or vehicles) involved in this incident?"
        ),
        quick_replies=yes_no(),
        delay_ms=1000,
        next=Branch(cases={"Yes": "other_party_details"}, default="incident_complete"),
    ),
    FlowStep(
        id="other_party_details",
        bot_message=(
            "📇 Please provide details about the other party:\n"
            "• Name\n• Contact information\n• Insurance company (if known)\n"
            "• License plate number"
        ),
        input_field=text_input(
            "otherPartyDetails",
            "Other Party Information",
            "Name: Jane Smith\nPhone: (555) 987-6543\nInsurance: State Farm\nLicense: ABC-1234",
            kind=InputFieldType.TEXTAREA,
        ),
        delay_ms=1000,
        next="incident_complete",
    ),
    FlowStep(
        id="incident_complete",
        bot_message=(
            "✅ Thank you for providing the incident details. "
            "Now let's assess the vehicle damage."
        ),
        delay_ms=1200,
        next="vehicle_make",
        progress=advance_stage("incident_details", "vehicle_damage_assessment"),
        sidebar=_current_stage("Damage Assessment"),
    ),
    # Estágio 3: avaliação de danos
    FlowStep(
        id="vehicle_make",
        bot_message="🚗 **Vehicle Information**\n\nWhat is the make of your vehicle?",
        input_field=text_input("vehicleMake", "Vehicle Make", "e.g., Honda, Toyota, Ford"),
        delay_ms=1000,
        next="vehicle_model",
    ),
    FlowStep(
        id="vehicle_model",
        bot_message="What is the model?",
        input_field=text_input("vehicleModel", "Vehicle Model", "e.g., Civic, Camry, F-150"),
        delay_ms=800,
        next="vehicle_year",
    ),
    FlowStep(
        id="vehicle_year",
        bot_message="What year is your vehicle?",
        input_field=text_input(
            "vehicleYear", "Vehicle Year", "e.g., 2018", kind=InputFieldType.NUMBER
        ),
        delay_ms=800,
        next="vehicle_info_complete",
    ),
    FlowStep(
        id="vehicle_info_complete",
        bot_message="✅ Vehicle information recorded.",
        delay_ms=800,
        next="damage_severity",
        sidebar=(
            set_field("damage_assessment", "Vehicle", value="Vehicle information recorded"),
        ),
    ),
    FlowStep(
        id="damage_severity",
        bot_message="🔍 How would you describe the overall damage severity?",
        quick_replies=replies(
            ("Minor (Cosmetic only)", "Minor"),
            ("Moderate (Some damage)", "Moderate"),
            ("Major (Significant damage)", "Major"),
            ("Total Loss", "Total Loss"),
        ),
        delay_ms=1000,
        next="vehicle_drivable",
        sidebar=(
            SetBadge(
                section_id="damage_assessment",
                transform=ValueTransform.UPPER,
                variant=BadgeVariant.ERROR,
                variant_map={"Minor": BadgeVariant.SUCCESS, "Moderate": BadgeVariant.WARNING},
            ),
            set_field("damage_assessment", "Severity"),
        ),
    ),
    FlowStep(
        id="vehicle_drivable",
        bot_message="🚦 Is the vehicle still drivable and safe to operate?",
        quick_replies=replies(
            ("✅ Yes, fully drivable", "Yes"),
            ("⚠️ Drivable but unsafe", "Partially"),
            ("❌ Not drivable", "No"),
        ),
        delay_ms=1000,
        next="damage_assessment_analyzing",
        sidebar=(set_field("damage_assessment", "Drivable"),),
    ),
    FlowStep(
        id="damage_assessment_analyzing",
        bot_message="🔄 Analyzing damage information and calculating repair estimates...",
        delay_ms=2000,
        next="cost_estimate_complete",
        sidebar=(
            ReplaceFields(section_id="cost_breakdown", fields=COST_ESTIMATE_FIELDS),
            set_field("timeline_status", "Est. Repair Time", value="3-5 business days"),
            set_field("timeline_status", "Est. Completion", value="January 2, 2026"),
        ),
    ),
    FlowStep(
        id="cost_estimate_complete",
        bot_message=(
            "💰 **Repair Cost Estimate**\n\n"
            "• Parts: $2,450.00\n• Labor: $1,800.00\n• Paint/Refinish: $950.00\n"
            "• Other: $280.00\n\n"
            "**Subtotal:** $5,480.00\n**Your Deductible:** -$500.00\n"
            "**Total Payout:** $4,980.00\n\n"
            "⏱️ Estimated repair time: 3-5 business days"
        ),
        delay_ms=1200,
        next="documentation_intro",
        progress=advance_stage("vehicle_damage_assessment", "documentation"),
        sidebar=_current_stage("Documentation"),
    ),
    # Estágio 4: documentação
    FlowStep(
        id="documentation_intro",
        bot_message=(
            "📸 **Documentation Required**\n\n"
            "Now I need you to upload photos and documents to support your claim. "
            "This helps us process your claim faster!"
        ),
        delay_ms=1000,
        next="damage_photos",
    ),
    FlowStep(
        id="damage_photos",
        bot_message=(
            "📷 Please upload photos of the damage from multiple angles.\n\n"
            "💡 **Tip:** Include photos of:\n"
            "• All damaged areas\n• VIN number\n• License plate\n• Overall vehicle\n"
            "• Close-ups of damage\n\n"
            "(Maximum 10 photos, 10MB each)"
        ),
        input_field=text_input("damagePhotos", "Damage Photos", kind=InputFieldType.FILE),
        delay_ms=1000,
        next="police_report_question",
        sidebar=(set_field("documentation_status", "Photos", value="Photos uploaded ✓"),),
    ),
    FlowStep(
        id="police_report_question",
        bot_message="👮 Was a police report filed for this incident?",
        quick_replies=yes_no(),
        delay_ms=1000,
        next=Branch(cases={"Yes": "police_report_number"}, default="witnesses_question"),
    ),
    FlowStep(
        id="police_report_number",
        bot_message="🆔 What is the police report number?",
        input_field=text_input(
            "policeReportNumber", "Police Report Number", "e.g., PR-2025-12345"
        ),
        delay_ms=1000,
        next="police_department",
        sidebar=(set_field("documentation_status", "Police Report"),),
    ),
    FlowStep(
        id="police_department",
        bot_message="🏢 Which police department filed the report?",
        input_field=text_input(
            "policeDepartment", "Police Department", "e.g., Springfield Police Department"
        ),
        delay_ms=1000,
        next="witnesses_question",
    ),
    FlowStep(
        id="witnesses_question",
        bot_message="👁️ Were there any witnesses to the incident?",
        quick_replies=yes_no(),
        delay_ms=1000,
        next=Branch(cases={"Yes": "witness_details"}, default="documentation_complete"),
    ),
    FlowStep(
        id="witness_details",
        bot_message=(
            "📋 Please provide witness information:\n"
            "• Full name\n• Phone number\n• Email (if available)\n"
            "• Brief description of what they witnessed"
        ),
        input_field=text_input(
            "witnessDetails",
            "Witness Information",
            "Name: Sarah Johnson\nPhone: (555) 234-5678\nEmail: sarah.j@email.com\n"
            "Witnessed the collision from the sidewalk",
            kind=InputFieldType.TEXTAREA,
        ),
        delay_ms=1000,
        next="documentation_complete",
    ),
    FlowStep(
        id="documentation_complete",
        bot_message=(
            "✅ **Documentation Complete!**\n\n"
            "All required documents and photos have been received. "
            "Your claim is being evaluated."
        ),
        delay_ms=1200,
        next="settlement_preferences",
        progress=advance_stage("documentation", "cost_estimation"),
        sidebar=_current_stage("Settlement Preferences"),
    ),
    # Estágio 5: liquidação
    FlowStep(
        id="settlement_preferences",
        bot_message=(
            "💳 **Settlement & Payment**\n\n"
            "How would you prefer to be contacted regarding your claim status?"
        ),
        quick_replies=replies(
            ("📧 Email", "Email"),
            ("📱 Phone", "Phone"),
            ("💬 SMS", "SMS"),
            ("🔔 App Notification", "App"),
        ),
        delay_ms=1000,
        next="payment_method",
        sidebar=(set_field("contact_info", "Preferred Method"),),
    ),
    FlowStep(
        id="payment_method",
        bot_message="💰 How would you like to receive your settlement payment of $4,980.00?",
        quick_replies=replies(
            ("🏦 Direct Deposit", "Direct Deposit"),
            ("✉️ Check by Mail", "Check"),
            ("💳 PayPal", "PayPal"),
            ("🔧 Pay Repair Shop", "Repair Shop"),
        ),
        delay_ms=1000,
        next="rental_car_question",
    ),
    FlowStep(
        id="rental_car_question",
        bot_message=(
            "🚗 Do you need a rental car while your vehicle is being repaired?\n\n"
            "💡 Your comprehensive policy includes rental car coverage."
        ),
        quick_replies=replies(
            ("✅ Yes, I need a rental", "Yes"),
            ("❌ No, not needed", "No"),
        ),
        delay_ms=1000,
        next="claim_processing",
    ),
    FlowStep(
        id="claim_processing",
        bot_message="⏳ Processing your claim and finalizing all details...",
        delay_ms=2500,
        next="claim_complete",
        progress=(CompleteAll(),),
    ),
    FlowStep(
        id="claim_complete",
        bot_message=(
            "🎉 **Claim Successfully Filed!**\n\n"
            "✅ **Claim Summary:**\n"
            f"• Claim ID: {CLAIM_ID}\n"
            "• Status: APPROVED\n"
            "• Payout Amount: $4,980.00\n"
            "• Processing Time: 2-3 business days\n"
            "• Estimated Repair: 3-5 business days\n\n"
            "📧 You will receive a confirmation email with all details and next steps.\n\n"
            "📱 You can track your claim status anytime in your account.\n\n"
            "Is there anything else I can help you with?"
        ),
        quick_replies=replies(
            ("📄 Download Summary PDF", "download"),
            ("📞 Speak to Adjuster", "adjuster"),
            ("🔄 File Another Claim", "restart"),
            ("✅ All Done", "done"),
        ),
        delay_ms=1500,
        sidebar=(
            SetBadge(section_id="claim_summary", value="APPROVED", variant=BadgeVariant.SUCCESS),
            set_field("timeline_status", "Current Stage", value="Completed"),
            set_field("timeline_status", "Next Action", value="Await payment"),
        ),
    ),
)

FLOW = FlowConfig(domain=DomainId.INSURANCE, start_step_id="welcome", steps=STEPS)
