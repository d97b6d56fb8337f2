"""Fluxo de atendimento bancário.

O pedido escolhido na saudação fica no scratch (`request`) e define o ramo:
abertura de conta, empréstimo, fraude ou contestação. Todos convergem para a
verificação de identidade.
"""

from __future__ import annotations

from guided_chat.domain.enums import BadgeVariant, DomainId, InputFieldType, StepStatus
from guided_chat.domain.flow import Branch, FlowConfig, FlowStep
from guided_chat.domain.models import ProgressStep, SidebarField, SidebarSection
from guided_chat.domain.patches import CompleteAll, SetBadge, UpsertField
from guided_chat.flows.common import advance_stage, replies, set_field, text_input

REQUEST_KEY = "request"

REQUEST_LABELS: dict[str, str] = {
    "open_account": "Open Account",
    "loan": "Apply for Loan",
    "fraud": "Report Fraud",
    "dispute": "Dispute Transaction",
}

PROGRESS: tuple[ProgressStep, ...] = (
    ProgressStep(id="verify", label="Verify", sublabel="Identity", status=StepStatus.CURRENT),
    ProgressStep(id="service", label="Service", sublabel="Selection"),
    ProgressStep(id="details", label="Details"),
    ProgressStep(id="review", label="Review"),
    ProgressStep(id="confirm", label="Confirm"),
)

SIDEBAR: tuple[SidebarSection, ...] = (
    SidebarSection(
        id="account",
        title="Account Information",
        icon="user",
        fields=[
            SidebarField(label="Account Holder", value="Not provided"),
            SidebarField(label="Account Type", value="Not selected"),
        ],
        default_open=True,
    ),
    SidebarSection(
        id="request",
        title="Request Details",
        icon="file-text",
        fields=[SidebarField(label="Request", value="Not selected")],
        collapsible=True,
        default_open=True,
    ),
)

STEPS: tuple[FlowStep, ...] = (
    FlowStep(
        id="welcome",
        bot_message="Welcome to your Virtual Banking Assistant! How can I help you today?",
        quick_replies=replies(
            ("💳 Open Account", "open_account"),
            ("💵 Apply for Loan", "loan"),
            ("🚨 Report Fraud", "fraud"),
            ("⚠️ Dispute Transaction", "dispute"),
        ),
        delay_ms=500,
        remember=REQUEST_KEY,
        next=Branch(
            cases={
                "open_account": "account_type",
                "loan": "loan_amount",
                "fraud": "account_number",
                "dispute": "account_number",
            },
            default="verify_identity",
        ),
        sidebar=(set_field("request", "Request", value_map=REQUEST_LABELS),),
    ),
    # Abertura de conta
    FlowStep(
        id="account_type",
        bot_message="Great! Which type of account would you like to open?",
        quick_replies=replies(
            ("🏦 Checking", "Checking"),
            ("💰 Savings", "Savings"),
            ("📈 Money Market", "Money Market"),
        ),
        delay_ms=800,
        next="verify_identity",
        sidebar=(set_field("account", "Account Type"),),
    ),
    # Empréstimo
    FlowStep(
        id="loan_amount",
        bot_message="How much would you like to borrow? Please enter the amount in dollars.",
        input_field=text_input(
            "loanAmount", "Loan Amount", "e.g., 15000", kind=InputFieldType.NUMBER
        ),
        delay_ms=800,
        next="verify_identity",
        sidebar=(
            UpsertField(section_id="request", label="Loan Amount", template="${value}"),
        ),
    ),
    # Fraude e contestação
    FlowStep(
        id="account_number",
        bot_message="Please enter the account number associated with this request.",
        input_field=text_input(
            "accountNumber", "Account Number", "e.g., 12345678", kind=InputFieldType.NUMBER
        ),
        delay_ms=800,
        next=Branch(
            scratch_key=REQUEST_KEY,
            cases={"fraud": "fraud_details", "dispute": "dispute_details"},
            default="verify_identity",
        ),
        sidebar=(
            UpsertField(section_id="request", label="Account", value="Account on file ✓"),
        ),
    ),
    FlowStep(
        id="fraud_details",
        bot_message=(
            "🚨 I'm sorry to hear that. Please describe the suspicious activity, including "
            "dates, amounts and merchants if you know them. (Minimum 50 characters)"
        ),
        input_field=text_input(
            "fraudDetails",
            "Suspicious Activity",
            "On Monday I noticed two charges I did not make...",
            kind=InputFieldType.TEXTAREA,
        ),
        delay_ms=1000,
        next="card_freeze",
        sidebar=(
            SetBadge(section_id="request", value="FRAUD ALERT", variant=BadgeVariant.ERROR),
        ),
    ),
    FlowStep(
        id="card_freeze",
        bot_message="Would you like me to freeze your card immediately while we investigate?",
        quick_replies=replies(
            ("🔒 Yes, freeze my card", "Yes"),
            ("❌ No, keep it active", "No"),
        ),
        delay_ms=800,
        next="verify_identity",
        sidebar=(
            UpsertField(
                section_id="request",
                label="Card Status",
                value_map={"Yes": "Frozen 🔒"},
                default="Active",
            ),
        ),
    ),
    FlowStep(
        id="dispute_details",
        bot_message=(
            "⚠️ Please describe the transaction you want to dispute and why. "
            "(Minimum 50 characters)"
        ),
        input_field=text_input(
            "disputeDetails",
            "Dispute Details",
            "I was charged twice for the same purchase on...",
            kind=InputFieldType.TEXTAREA,
        ),
        delay_ms=1000,
        next="verify_identity",
        sidebar=(
            SetBadge(section_id="request", value="UNDER REVIEW", variant=BadgeVariant.WARNING),
        ),
    ),
    # Verificação de identidade (comum a todos os ramos)
    FlowStep(
        id="verify_identity",
        bot_message="To proceed, I need to verify your identity. Please provide your full name.",
        input_field=text_input("fullName", "Full Name", "e.g., Jane Smith"),
        delay_ms=1000,
        next="verify_ssn",
        sidebar=(set_field("account", "Account Holder"),),
    ),
    FlowStep(
        id="verify_ssn",
        bot_message=(
            "For security purposes, please provide the last 4 digits of your "
            "Social Security Number."
        ),
        input_field=text_input("ssn", "Last 4 Digits of SSN", "XXXX"),
        delay_ms=1000,
        next="identity_verified",
    ),
    FlowStep(
        id="identity_verified",
        bot_message="🔐 Thank you! Verifying your identity...",
        delay_ms=1000,
        next="complete",
        progress=(
            *advance_stage("verify", "service"),
            *advance_stage("service", "details"),
        ),
    ),
    FlowStep(
        id="complete",
        bot_message=(
            "✅ Identity verified! Your request is being processed. "
            "You will receive a confirmation email within 24 hours."
        ),
        delay_ms=1500,
        progress=(CompleteAll(),),
        sidebar=(
            SetBadge(section_id="account", value="VERIFIED", variant=BadgeVariant.SUCCESS),
        ),
    ),
)

FLOW = FlowConfig(domain=DomainId.BANKING, start_step_id="welcome", steps=STEPS)
