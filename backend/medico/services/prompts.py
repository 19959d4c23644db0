"""
Prompts and response schemas sent to the AI service.

Schemas use the upper-case OpenAPI subset understood by Gemini; the OpenAI
provider converts them to plain JSON Schema.
"""

from ..models import ViewState, HealthStats

CHAT_SYSTEM_INSTRUCTION = """You are Medico Assistant, an expert AI healthcare companion.
Your goal is to explain medical concepts, analyze reports, and check symptoms with empathy and accuracy.
ALWAYS start by clarifying you are an AI and not a doctor.
If the user uploads a medical report, extract key findings, explain them in simple terms, and flag any abnormal values.
If the user describes symptoms, perform a preliminary risk assessment and suggest whether they should see a doctor immediately.
Keep responses concise but informative. Use Markdown for formatting.
"""

MEDICINE_SYSTEM_INSTRUCTION = """You are Medico Assistant's medicine guide, an AI that explains medications.
ALWAYS start by clarifying you are an AI and not a doctor or pharmacist.
When the user names a medicine or uploads a photo of a package or prescription:
- identify the medicine and its active ingredients
- explain what it is commonly used for
- describe typical dosage guidance as printed on labels, never a personal dose
- list common side effects and important interactions or warnings
Tell the user to follow their prescriber's instructions and to contact a pharmacist with doubts.
Keep responses concise. Use Markdown for formatting.
"""

REMEDY_SYSTEM_INSTRUCTION = """You are Medico Assistant's home-care guide, an AI that suggests safe home remedies.
ALWAYS start by clarifying you are an AI and not a doctor.
For mild, common complaints suggest evidence-informed home remedies and lifestyle measures
(rest, hydration, diet, gentle exercise), and explain how each one helps.
Clearly list warning signs that mean the user should stop home care and see a doctor.
Never suggest remedies for emergencies; tell the user to seek urgent care instead.
Keep responses concise. Use Markdown for formatting.
"""

SYSTEM_INSTRUCTIONS = {
    ViewState.CHAT: CHAT_SYSTEM_INSTRUCTION,
    ViewState.MEDICINE: MEDICINE_SYSTEM_INSTRUCTION,
    ViewState.REMEDY: REMEDY_SYSTEM_INSTRUCTION,
}

GREETINGS = {
    ViewState.CHAT: (
        "Hello! I'm Medico Assistant. I can help explain medical reports, check symptoms, "
        "or track your health history. How can I help you today?"
    ),
    ViewState.MEDICINE: (
        "Hi! Tell me the name of a medicine or upload a photo of its label, "
        "and I'll explain what it's for, how it's usually taken, and what to watch out for."
    ),
    ViewState.REMEDY: (
        "Hi! Describe a mild complaint and I'll suggest safe home remedies, "
        "along with the signs that mean you should see a doctor."
    ),
}

IMAGE_ONLY_PROMPT = "Analyze this image"


def system_instruction_for(mode: ViewState) -> str:
    return SYSTEM_INSTRUCTIONS.get(mode, CHAT_SYSTEM_INSTRUCTION)


def health_context_block(stats: HealthStats) -> str:
    """Live-vitals block appended to the system instruction."""
    return (
        f"\n\n[CONTEXT] The user has connected a wearable device ({stats.source}).\n"
        f"Current Live Vitals:\n"
        f"- Heart Rate: {stats.heart_rate:g} bpm\n"
        f"- Steps Today: {stats.steps}\n"
        f"- Sleep: {stats.sleep_hours:.1f} hours\n"
        f"- SpO2: {stats.spo2:g}%\n"
        f"- Body Temp: {stats.temperature:.1f} F\n"
        f"Use this data to provide more personalized advice if relevant to their question."
    )


REPORT_ANALYSIS_PROMPT = """Analyze this medical report image.
Extract the following structured data:
1. A risk score from 0-100 (0 being healthy, 100 being critical) based on findings.
2. A brief summary of the report.
3. Key findings (bullet points).
4. Actionable recommendations.
5. Extracted vital signs or lab values with their status (Normal, Warning, Critical).

Return ONLY JSON.
"""

REPORT_ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "risk_score": {"type": "INTEGER"},
        "summary": {"type": "STRING"},
        "key_findings": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
        "vital_signs": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "value": {"type": "STRING"},
                    "status": {"type": "STRING", "enum": ["Normal", "Warning", "Critical"]},
                },
                "required": ["name", "value", "status"],
            },
        },
    },
    "required": ["risk_score", "summary", "key_findings", "recommendations", "vital_signs"],
}

RISK_PROFILE_PROMPT = """Below is what a user has told a healthcare assistant.
Infer their health risk in each category as a score from 0 (no risk) to 100 (critical):
cardiovascular, metabolic, respiratory, lifestyle, and an overall score.
Only use what the user actually said; with little information keep scores low and say so.
Write a one-sentence summary.

Return ONLY JSON.

Conversation:
{conversation}
"""

RISK_PROFILE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "overall_score": {"type": "INTEGER"},
        "cardiovascular": {"type": "INTEGER"},
        "metabolic": {"type": "INTEGER"},
        "respiratory": {"type": "INTEGER"},
        "lifestyle": {"type": "INTEGER"},
        "summary": {"type": "STRING"},
    },
    "required": ["overall_score", "cardiovascular", "metabolic", "respiratory", "lifestyle", "summary"],
}

METRIC_EXTRACTION_PROMPT = """Extract any numeric health metrics (lab values or vitals such as
Total Cholesterol, Glucose (Fasting), HbA1c, Blood Pressure Systolic) from the user's input
and any attached image. Use the date shown on a report when present, otherwise {today}.
Dates use the format YYYY-MM-DD. If there are no metrics return an empty list.

Return ONLY JSON.

User input:
{text}
"""

METRIC_EXTRACTION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "metrics": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "date": {"type": "STRING"},
                    "value": {"type": "NUMBER"},
                    "unit": {"type": "STRING"},
                    "type": {"type": "STRING"},
                },
                "required": ["date", "value", "unit", "type"],
            },
        },
    },
    "required": ["metrics"],
}

# Words that make a text-only message worth a metric extraction pass
METRIC_KEYWORDS = ("cholesterol", "glucose")

DISCLAIMER = (
    "Medico Assistant uses advanced AI to help you understand your health data. "
    "However, it is not a substitute for professional medical advice. "
    "Always consult with a qualified healthcare provider for diagnosis and treatment."
)
