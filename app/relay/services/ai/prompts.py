"""
Extraction prompt for debt settlement documents.

The prompt is kept as data (a versioned template) and rendered by a pure
function, so wording changes can be reviewed and tested on their own.
"""

from pydantic import BaseModel, ConfigDict, Field

NOT_FOUND = "NOT FOUND"

CONFIDENCE_LEVELS = ("high", "medium", "low")


class FieldSpec(BaseModel):
    """A single field the model is asked to extract."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    notes: str = Field(default="Any clarifications")


class PromptTemplate(BaseModel):
    """
    Versioned extraction instructions.

    Attributes:
        version: Informal version tag of the wording.
        task: Opening instruction sentence.
        fields: Ordered fields to extract.
        rules: Extraction rules appended after the JSON structure.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    task: str
    fields: tuple[FieldSpec, ...] = Field(..., min_length=1)
    rules: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


DEFAULT_TEMPLATE = PromptTemplate(
    version="2025-01",
    task=(
        "You are an expert legal document analyzer for debt settlements. "
        "Extract debt settlement payment details from this document with extreme precision."
    ),
    fields=(
        FieldSpec(
            name="paymentBreakdown",
            description="Payment schedule with all amounts and dates",
        ),
        FieldSpec(name="firstPaymentDate", description="First payment due date"),
        FieldSpec(
            name="currentBalance",
            description="Total current balance/debt amount BEFORE settlement",
        ),
        FieldSpec(
            name="fees",
            description=(
                "List ANY fees explicitly (Attorney Fees, Court Costs, etc). "
                "If none, write 'None'. Format: 'Court: $X, Attorney: $Y'"
            ),
        ),
        FieldSpec(
            name="signatureRequired",
            description="YES or NO - does the client/defendant need to sign this document?",
            notes="If YES, specify who needs to sign",
        ),
        FieldSpec(
            name="remittanceTo",
            description="Name of the entity that receives the payment",
            notes="Default to letterhead if not stated",
        ),
        FieldSpec(
            name="mailingAddress",
            description="Complete mailing address for payment",
            notes="Default to letterhead if not stated",
        ),
        FieldSpec(
            name="checkPayableTo",
            description="Name the check is made payable to",
            notes="Only if explicitly stated",
        ),
        FieldSpec(name="clientName", description="Client/debtor name"),
        FieldSpec(name="referenceNumber", description="Account/reference number"),
        FieldSpec(
            name="additionalInstructions",
            description="Any special payment instructions",
            notes="Include special requirements",
        ),
    ),
    rules=(
        f'If information is not found, use "{NOT_FOUND}" as the data value.',
        "Confidence levels:\n"
        "   - high: Clearly stated and unambiguous\n"
        "   - medium: Implied or requires interpretation\n"
        "   - low: Unclear or possibly incorrect",
        "remittanceTo: NAME of the entity receiving payment. "
        "Default to the letterhead entity unless the body says otherwise.",
        "mailingAddress: ADDRESS for payment. "
        "Default to the letterhead address unless the body says otherwise.",
        'checkPayableTo: ONLY extract if explicit ("Make check payable to"). '
        f'Otherwise use "{NOT_FOUND}".',
        'signatureRequired: set data to "YES" if the client/defendant must sign '
        '(e.g. "Stipulation", "Agreed to by").',
        "Source must be exact text from the document; location describes where it was found.",
        "Return ONLY the JSON object. No prose, no markdown code blocks.",
    ),
)


def _render_field(field: FieldSpec) -> str:
    levels = "|".join(CONFIDENCE_LEVELS)
    return (
        f'  "{field.name}": {{\n'
        f'    "data": "{field.description}",\n'
        f'    "confidence": "{levels}",\n'
        f'    "source": "Exact quote from document",\n'
        f'    "notes": "{field.notes}",\n'
        f'    "location": "Where found in document"\n'
        f"  }}"
    )


def build_extraction_prompt(template: PromptTemplate = DEFAULT_TEMPLATE) -> str:
    """
    Render the extraction instructions sent alongside the document.

    Args:
        template: Prompt template to render. Defaults to the canonical version.

    Returns:
        The instruction text for the upstream model.
    """
    structure = ",\n".join(_render_field(f) for f in template.fields)
    rules = "\n".join(f"{i}. {rule}" for i, rule in enumerate(template.rules, start=1))

    return f"""{template.task} Return ONLY valid JSON with no markdown formatting.

REQUIRED JSON STRUCTURE:
{{
{structure}
}}

EXTRACTION RULES:
{rules}"""
