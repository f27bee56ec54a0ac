"""Single table of candidate key spellings and fixed fallback texts.

The generator is asked for camelCase keys but does not always honor it, so
every logical field lists the spellings it has been observed to emit, in
priority order. Placeholder sentences live here too so the normalizer and the
workflows never hard-code client-visible text.
"""

from typing import Dict, Optional, Tuple

NOT_SPECIFIED = "Not specified"

CANDIDATE_KEYS: Dict[str, Tuple[str, ...]] = {
    # Identity
    "billNumber": ("billNumber", "bill_number", "BillNumber", "Bill Number"),
    "billName": ("billName", "bill_name", "BillName", "Bill Name"),
    "state": ("state", "State", "jurisdiction", "Jurisdiction"),
    "yearIntroduced": ("yearIntroduced", "year_introduced", "YearIntroduced", "Year Introduced"),
    # Attribution
    "sponsors": (
        "sponsors", "bill_sponsors", "Sponsors", "BillSponsor", "Bill Sponsor", "Bill Sponsor(s)",
    ),
    "cosponsors": (
        "cosponsors", "bill_cosponsors", "Cosponsors", "BillCosponsors", "Bill Cosponsors",
        "Bill Cosponsor(s)",
    ),
    "committee": (
        "committee", "committee_referred_to", "Committee", "CommitteeReferredTo",
        "Committee Referred To",
    ),
    # Narrative
    "summary": ("summary", "Summary", "bill_summary", "BillSummary", "Bill Summary"),
    "financialImplications": (
        "financialImplications", "financial_implications", "FinancialImplications",
        "Financial Implications",
    ),
    "ideologicalLeaning": (
        "ideologicalLeaning", "ideological_leaning", "IdeologicalLeaning", "Ideological Leaning",
    ),
    "advocacyGroupPositions": (
        "advocacyGroupPositions", "advocacy_group_positions", "AdvocacyGroupPositions",
        "Advocacy Group Positions",
    ),
    "changesTo": (
        "changesTo", "changes_to", "ChangesTo", "Changes To", "changesToExistingLaw",
        "changes_to_existing_law", "Changes To Existing Law",
    ),
    "similarLaws": ("similarLaws", "similar_laws", "SimilarLaws", "Similar Laws"),
    "otherFactors": ("otherFactors", "other_factors", "OtherFactors", "Other Factors"),
    # Collections
    "sections": ("sections", "Sections", "bill_sections", "BillSections", "Bill Sections"),
    "citations": ("citations", "Citations", "sources", "Sources"),
}

IDENTITY_FIELDS = ("billNumber", "billName", "state", "yearIntroduced")
ATTRIBUTION_FIELDS = ("sponsors", "cosponsors", "committee")
RESEARCH_FIELDS = (
    "financialImplications",
    "ideologicalLeaning",
    "advocacyGroupPositions",
    "changesTo",
    "similarLaws",
    "otherFactors",
)
NARRATIVE_FIELDS = ("summary",) + RESEARCH_FIELDS

# Nested summary shapes: {"summary": {"description": ...}} / {"Summary": {"Purpose": ...}}
SUMMARY_TEXT_KEYS = ("description", "Description", "Purpose", "purpose")
SUMMARY_NESTED_SECTION_KEYS = ("sections", "Sections")

SECTION_TITLE_KEYS = ("title", "number", "Title", "Number")
SECTION_BODY_KEYS = ("content", "description", "Description")
SECTION_MAPPING_BODY_KEYS = ("description", "Description", "content")

SPONSOR_NAME_KEYS = ("name", "Name")

MISSING_TEMPLATE = "Information about {field} is not available at this time."
MALFORMED_TEMPLATE = "Information about {field} is not properly formatted."

SUMMARY_MIN_CHARS = 200
SUMMARY_MINIMAL_SUFFIX = (
    " (Note: This summary is minimal and should be expanded with a more comprehensive "
    "analysis of at least 200 words that fully explains the bill's purpose, provisions, "
    "and implications.)"
)
SUMMARY_MISSING = (
    "No adequate summary available. A comprehensive summary of at least 200 words should "
    "be provided that fully explains the bill's purpose, provisions, and implications."
)

# Substituted for the whole enrichment fragment when its output cannot be decoded.
ENRICHMENT_FALLBACK: Dict[str, object] = {
    "financialImplications": "The financial implications could not be determined at this time.",
    "ideologicalLeaning": "The ideological leaning could not be determined at this time.",
    "advocacyGroupPositions": (
        "Information on advocacy group positions could not be determined at this time."
    ),
    "changesTo": "The changes to existing law could not be determined at this time.",
    "similarLaws": (
        "Information on similar laws in other states could not be determined at this time."
    ),
    "otherFactors": "Additional factors to consider could not be determined at this time.",
    "citations": [],
}

_KEY_TO_FIELD = {key: name for name, keys in CANDIDATE_KEYS.items() for key in keys}


def field_for_key(key: str) -> Optional[str]:
    """Return the logical field a raw payload key spells, or None if unknown."""
    return _KEY_TO_FIELD.get(key)
