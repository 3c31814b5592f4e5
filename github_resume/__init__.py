"""Find GitHub identities in resume text and enrich the best match."""

from .analyzer import analyze_document, analyze_text, find_candidates

__version__ = "0.1.0"

__all__ = ["analyze_document", "analyze_text", "find_candidates", "__version__"]
