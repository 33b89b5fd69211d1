from __future__ import annotations

OTHER_TACTIC_ID = "other"

TACTIC_IDS: tuple[str, ...] = (
    "gaslighting",
    "darvo",
    "blame-shifting",
    "minimization",
    "stonewalling",
    "contempt",
    "guilt-tripping",
    "threats",
    "coercion",
    "triangulation",
    "boundaries",
    "projection",
)

TACTIC_WEIGHTS: dict[str, float] = {
    "threats": 1.40,
    "coercion": 1.30,
    "gaslighting": 1.20,
    "darvo": 1.10,
    "contempt": 1.05,
    "blame-shifting": 1.00,
    "minimization": 1.00,
    "guilt-tripping": 1.00,
    "triangulation": 1.00,
    "boundaries": 1.00,
    "projection": 1.00,
    "stonewalling": 0.95,
}
DEFAULT_TACTIC_WEIGHT = 1.00

MAX_EXAMPLES_PER_TACTIC = 5
MAX_QUOTE_LENGTH = 280
MAX_RECEIPTS = 30

SYSTEM_PROMPT = (
    "You are an analyst that identifies manipulation patterns in message transcripts "
    "taken from chat screenshots. Avoid clinical diagnoses and do not label people. "
    "Use cautious language such as \"likely indicators\". Return only JSON."
)

OUTPUT_SCHEMA_NOTE = """You MUST output strictly one JSON object with this structure:
{
  "confidence": "number 0-1, how confident you are in the overall reading",
  "risk_label": "low|medium|high (optional)",
  "tactics": [
    {
      "id": "one of the taxonomy ids, or \\"other\\"",
      "name": "short display name",
      "likelihood": "number 0-1",
      "severity": "integer 1-5",
      "frequency": "integer 0-5, how often the pattern recurs",
      "examples": ["verbatim quote, at most 280 characters"]
    }
  ],
  "receipts": [
    { "quote": "string", "category": "taxonomy id", "source": "speaker or image", "severity": "integer 1-5" }
  ],
  "kpis": { "any_metric_name": "number or string" },
  "narrative": "two or three sentences summarizing the pattern, cautiously worded"
}"""

DEFAULT_INSTRUCTIONS = (
    "Read the transcript extracted from chat screenshots. Detect manipulation tactics "
    "using only the taxonomy ids provided. List each detected tactic once, with at most "
    f"{MAX_EXAMPLES_PER_TACTIC} verbatim example quotes, and at most {MAX_RECEIPTS} receipts "
    "overall. Omit tactics with no supporting evidence. If the transcript is empty or "
    "unreadable, return an empty tactics list.\n\n" + OUTPUT_SCHEMA_NOTE
)


def tactic_weight(tactic_id: str) -> float:
    return TACTIC_WEIGHTS.get(tactic_id, DEFAULT_TACTIC_WEIGHT)
