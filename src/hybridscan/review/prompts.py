"""Prompt text for the semantic reviewer."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are an expert security analyst specializing in code vulnerability "
    "detection. Analyze code thoroughly and answer only with JSON in the exact "
    "format requested."
)

_REVIEW_TEMPLATE = """Analyze the following {language} code from {filename} for security vulnerabilities.

Respond with a JSON object of this shape:
{{
  "vulnerabilities": [
    {{
      "type": "vulnerability category, e.g. 'SQL Injection', 'XSS', 'Hardcoded Credentials'",
      "severity": "low|medium|high|critical",
      "line": line number where the issue is found,
      "column": column number (optional),
      "message": "description of the issue",
      "suggestion": "how to fix it",
      "confidence": number from 0.0 to 1.0
    }}
  ],
  "overallRisk": "low|medium|high|critical",
  "summary": "overall security assessment",
  "recommendations": ["general security recommendations"]
}}

Look for common vulnerabilities including:
- SQL injection
- Cross-site scripting (XSS)
- Cross-site request forgery (CSRF)
- Command injection
- Path traversal
- Hardcoded secrets and credentials
- Weak cryptographic algorithms and insecure randomness
- Missing input validation
- Insecure CORS or session configuration
- Information disclosure
- Authentication bypass and authorization flaws
- Insecure deserialization

Only report issues you are confident are real.

Code:
```{language}
{code}
```"""


def build_review_prompt(filename: str, code: str, language: str = "") -> str:
    return _REVIEW_TEMPLATE.format(
        filename=filename or "untitled",
        language=language or "source",
        code=code,
    )
