"""
Citation extraction and formatting.

Builds human-readable citations from retrieval results for answer grounding.

Dependencies: docuchat.models
System role: Citation formatting business logic
"""

from docuchat.models.search import DocumentSearchResult


class CitationBuilder:
    """Citation building business logic."""

    def format_citation(self, result: DocumentSearchResult) -> str:
        """
        Format a single citation.

        Args:
            result: Search result

        Returns:
            str: `"<fileName>"` or `"<fileName> (Page N)"`
        """
        page = result.metadata.page_number
        if page:
            return f"{result.metadata.file_name} (Page {page})"
        return result.metadata.file_name

    def build_citations(self, results: list[DocumentSearchResult]) -> list[str]:
        """
        Build de-duplicated citations, first occurrence order preserved.

        Args:
            results: Search results in relevance order

        Returns:
            list[str]: Unique citation strings
        """
        return list(dict.fromkeys(self.format_citation(r) for r in results))
