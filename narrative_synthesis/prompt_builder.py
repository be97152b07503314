"""Prompt builder for report narratives."""

from typing import Any, Dict, List, Sequence

_SYSTEM_INSTRUCTIONS = """\
You are a network operations analyst writing an executive report section.

STRICT RULES:
- Use ONLY the findings provided below. Do not invent sites, devices or numbers.
- Do NOT compute new figures; quote counts exactly as given.
- Mention business-hours impact where a finding is flagged YES.
- Write plain prose paragraphs. No markdown tables, no code fences.
"""


def format_categories(categories: Sequence[Dict[str, Any]]) -> str:
    """Render categories as a plain-text block, one finding per line.

    Args:
        categories: Category dicts shaped like ``CategoryResponse`` dumps
            (``category_name``, ``total_findings_count``, ``findings``).

    Returns:
        Text with a ``### <name> (<n> findings)`` heading per category.
    """
    blocks: List[str] = []
    for category in categories:
        findings = category.get("findings") or []
        total = category.get("total_findings_count", len(findings))
        lines = [f"### {category.get('category_name', 'Findings')} ({total} findings)"]
        for finding in findings:
            summary = finding.get("summary_line") or (
                f"{finding.get('site', '')} {finding.get('device', '')}".strip()
            )
            details = [
                f"severity={finding.get('severity') or 'n/a'}",
                f"occurrences={finding.get('occurrences', 0)}",
                f"business_hours_impact={finding.get('business_hours_impact', 'NO')}",
            ]
            if finding.get("local_time"):
                details.append(f"local_time={finding['local_time']}")
            lines.append(f"- {summary} ({', '.join(details)})")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + ("\n" if blocks else "")


class NarrativePromptBuilder:
    """Builds the prompt for one chunk of report findings."""

    def build_prompt(
        self,
        findings_text: str,
        document_id: str,
        chunk_index: int = 1,
        chunk_total: int = 1,
    ) -> str:
        """Build the narrative prompt for one chunk.

        Args:
            findings_text: Chunk of text produced by ``format_categories``.
            document_id: Identifier of the analyzed report.
            chunk_index: 1-based position of this chunk.
            chunk_total: Number of chunks for the document.

        Returns:
            A fully formatted prompt string.
        """
        part = f" (part {chunk_index} of {chunk_total})" if chunk_total > 1 else ""
        return (
            f"{_SYSTEM_INSTRUCTIONS}\n"
            f"# REPORT\n\nDocument: {document_id}{part}\n\n"
            f"# FINDINGS\n\n{findings_text}\n"
            f"# TASK\n\n"
            f"Write a concise narrative of the findings above for network "
            f"operations leadership."
        )
