"""Heritage detection - Decide whether a church should pass heritage review"""
from ..domain.models import Church
from ..domain.enums import HeritageClassification
from ..config.settings import settings

HERITAGE_CUTOFF_YEAR = settings.heritage_cutoff_year


def should_require_heritage_review(church: Church) -> bool:
    """
    True when the church shows any heritage indicator:
    ICP/NCT classification, founded before 1900, historical documents,
    or architectural significance.
    """
    if church.is_heritage:
        return True
    if church.founded_year is not None and church.founded_year < HERITAGE_CUTOFF_YEAR:
        return True
    return church.has_historical_documents or church.architectural_significance


def suggest_heritage_classification(church: Church) -> HeritageClassification:
    if church.classification != HeritageClassification.UNKNOWN:
        return church.classification
    if church.founded_year is not None and church.founded_year < HERITAGE_CUTOFF_YEAR:
        return HeritageClassification.ICP
    return HeritageClassification.NON_HERITAGE
