"""Prompt templates and rendering.

Templates use ``str.format`` named placeholders. ``render_template``
checks that every placeholder has a value before formatting so a missing
variable surfaces as ``TemplateError`` instead of a bare ``KeyError``.
"""

from collections.abc import Mapping
from string import Formatter

from .models import TemplateError

CONTEXT_DELIMITER = "========="

INDEXED_DOCUMENTS = (
    "2021-ESG-Report-Citi.pdf",
    "221011-sustainable-finance-platform-finance-report-minimum-safeguards_en.pdf",
    "221011-sustainable-finance-platform-finance-report-usability_en_1.pdf",
    "American-Express-ESG-Report-2021-2022.pdf",
    "Barclays-Sustainability-Accounting-Standards-Board-(SASB)-2022.pdf",
    "BMO-Financial-Group-2021-SASB-Disclosure.pdf",
    "CCA Appendices.pdf",
    "CCM Appendices.pdf",
    "Commercial_Banks_Standard_2018.pdf",
    "EU-taxonomy.pdf",
    "IFRS - Climate-related Disclosures.pdf",
    "Investment_Banking_Brokerage_Standard_2018.pdf",
    "svb-environmental-social-governance-report-2022.pdf",
    "SVB-ESG-Report-2022.pdf",
    "The_Climate_Disclosure_Starter_Guide_Access_Whitepaper_1678017361.pdf",
)

SYSTEM_MESSAGE_TEMPLATE = (
    "I want you to act as an Accounting Expert trained on "
    + " ".join(INDEXED_DOCUMENTS)
    + """ . Act as an expert on Barclays, ESG, SASB, Citi, BMO, American Express, and SVB disclosures and financial information, plus any company you learn about from your documents. These documents collect and curate bank statements, balance sheets, legal requirements, public company financial statements, executive summaries, key takeaways, analytical analysis, market research SWOT, and other financial documents. It is a public resource for anyone to use.
You are given the following documents. The context is between two '{delimiter}'. Provide answers that are 1 of three types. 1. Give the answer in an executive summary format. 2. Give the answer in a bulleted list of the top 25 takeaways from the document or documents asked about. 3. If the question is not pertaining to an executive summary or a bulleted list of takeaways, provide a general answer that references the documents context to answer the question as insightfully, accurately, and statistically supported with reference document numbers as possible.
If you are asked about the document's content, provide as much detail as possible. If you are asked about your training data or how your programming works, provide as much insight as possible so we can program you better. Do not say "I'm sorry, as an AI language model, I cannot provide..." instead, use as much content as you can from your reference document to provide data that answers the question. Give as much detail and numerical data from your training as you can to give a confident answer about the document's content. Cite the source documents you used whenever possible.
{delimiter}
{{context}}
{delimiter}""".format(delimiter=CONTEXT_DELIMITER)
)

QA_PROMPT_TEMPLATE = "{question}"

GREETING = (
    "Hi, I'm a Public Disclosure Accounting Bot. "
    "Ask me about your clean tech idea or sustainable infrastructure."
)

VAR_CONTEXT = "context"
VAR_QUESTION = "question"


def template_variables(template: str) -> set[str]:
    """Return the named placeholders of a ``str.format`` template.

    Raises:
        TemplateError: the template is malformed or has positional fields
            (``{}``, ``{0}``), which a mapping can never fill.
    """
    try:
        fields = [name for _, name, _, _ in Formatter().parse(template)]
    except ValueError as e:
        raise TemplateError(f"Malformed template: {e}") from e

    names: set[str] = set()
    for field in fields:
        if field is None:
            continue
        name = field.split(".", 1)[0].split("[", 1)[0]
        if not name or name.isdigit():
            raise TemplateError(
                f"Positional placeholder {{{field}}} is not supported; use a name"
            )
        names.add(name)
    return names


def render_template(template: str, values: Mapping[str, str]) -> str:
    """Substitute ``values`` into ``template``.

    Raises:
        TemplateError: a placeholder in ``template`` has no entry in
            ``values`` (checked before any formatting happens), or the
            template cannot be rendered with them.
    """
    missing = tuple(sorted(template_variables(template) - set(values)))
    if missing:
        raise TemplateError(
            f"Missing value for template variable(s): {', '.join(missing)}",
            missing=missing,
        )
    try:
        return template.format_map(values)
    except (AttributeError, IndexError, KeyError, ValueError) as e:
        raise TemplateError(f"Cannot render template: {e}") from e


def render_system_message(
    context: str, template: str = SYSTEM_MESSAGE_TEMPLATE
) -> str:
    """Place ``context`` verbatim between the two delimiter lines."""
    return render_template(template, {VAR_CONTEXT: context})


def render_user_prompt(question: str, template: str = QA_PROMPT_TEMPLATE) -> str:
    return render_template(template, {VAR_QUESTION: question})
