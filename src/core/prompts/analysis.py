import json
from typing import List

from langchain_core.prompts import PromptTemplate

from src.domain.entities.request import ActionKind, AnalysisRequest, DocumentSummary
from src.domain.schemas.analysis import EXAMPLE_OUTPUT

DEFAULT_DOCUMENT_CHARS = 1000

SYSTEM_PREAMBLE = """You are BoardBravo, an AI assistant specialized in analyzing board meeting documents and corporate governance materials. You help board members, executives, and governance professionals by:

1. Summarizing board decks, meeting minutes, and reports
2. Identifying key risks and mitigation strategies
3. Analyzing financial trends and KPIs
4. Evaluating investment pitches and opportunities
5. Extracting action items and strategic initiatives

When analyzing documents, focus on:
- Executive summaries and key decisions
- Financial performance and trends
- Risk assessments and compliance issues
- Strategic initiatives and market opportunities
- Governance matters and regulatory updates

You MUST respond with a single valid JSON object and nothing else.
Do not wrap the JSON in markdown, do not add commentary before or after it."""

NO_DOCUMENTS_CONTEXT = "No documents have been uploaded yet. Ask the user to upload documents for analysis."

ANALYSIS_TEMPLATE = PromptTemplate.from_template("""{preamble}

Required JSON structure (omit sections you have no data for, never invent figures that are not in the documents):
{schema}

Document Context:
{context}

User Question: {question}

JSON Response:""")


class PromptBuilder:
    """Assembles the single text payload sent to a provider"""

    def __init__(self, max_document_chars: int = DEFAULT_DOCUMENT_CHARS):
        self.max_document_chars = max_document_chars

    def build(self, request: AnalysisRequest) -> str:
        return ANALYSIS_TEMPLATE.format(
            preamble=SYSTEM_PREAMBLE,
            schema=json.dumps(EXAMPLE_OUTPUT, indent=2),
            context=self.format_documents(request.documents),
            question=self.contextual_question(request),
        )

    def format_documents(self, documents) -> str:
        if not documents:
            return NO_DOCUMENTS_CONTEXT
        return "\n\n".join(self._format_document(doc) for doc in documents)

    def _format_document(self, document: DocumentSummary) -> str:
        text = (document.extracted_text or "").strip()
        if not text:
            return f"Document: {document.name}\n(no extracted text available)"
        return f"Document: {document.name}\n{text[:self.max_document_chars]}"

    def contextual_question(self, request: AnalysisRequest) -> str:
        """Wrap the literal user prompt with action/mention framing and integration notes"""
        context = request.action_context
        if context is not None and context.kind == ActionKind.AGENT_ACTION and context.action_title:
            lines = [
                f"Agent Action: {context.action_title}",
                "",
                f"Request: {request.prompt}",
                "",
                "Please provide detailed analysis based on all available documents"
                + (" and connected integrations." if request.integrations else "."),
            ]
            lines.extend(self._action_requirements(request))
            message = "\n".join(lines)
        elif context is not None and context.kind == ActionKind.AGENT_MENTION:
            message = (
                f"@Agent Request: {request.prompt}\n\n"
                "Please provide helpful analysis based on available documents and context. "
                "Focus on actionable insights relevant to board governance and business decisions."
            )
        else:
            message = request.prompt

        if request.integrations:
            message += f"\n\nNote: The following integrations are available: {', '.join(request.integrations)}"
        return message

    @staticmethod
    def _action_requirements(request: AnalysisRequest) -> List[str]:
        lines: List[str] = []
        if request.generate_charts:
            lines += ["", "IMPORTANT: Generate visual charts and graphs to support your analysis. Include:"]
            if request.chart_types:
                lines.append(f"- Chart types: {', '.join(request.chart_types)} charts")
            lines += [
                "- Bar charts for comparisons and categorical data",
                "- Line charts for trends over time",
                "- Pie charts for proportional data",
                "- Include specific numerical data points",
            ]
        if request.include_statistics:
            lines += [
                "",
                "Include detailed statistics such as:",
                "- Key performance metrics with numerical values",
                "- Percentage changes and growth rates",
                "- Comparative analysis with benchmarks",
                "- Risk assessments with probability scores",
                "- Recommendations with priority levels",
            ]
        if request.request_visual_analysis:
            lines += [
                "",
                "Provide visual analysis summaries including:",
                "- Key insights with supporting data",
                "- Actionable recommendations",
                "- Risk factors and mitigation strategies",
                "- Performance indicators and benchmarks",
            ]
        return lines
