from __future__ import annotations

from dataclasses import dataclass

DEFAULT_SUBJECT = "Your Invoice from {{companyName}}"
DEFAULT_BODY = """Hello {{customerName}},

Thank you for choosing {{companyName}}!

Here are the details of your recent session:
- PC: {{pcName}}
- Duration: {{duration}}
- Total Amount: {{amount}}

We hope to see you again soon!

Best,
The {{companyName}} Team
"""


@dataclass
class EmailTemplate:
    subject: str = DEFAULT_SUBJECT
    body: str = DEFAULT_BODY


@dataclass(frozen=True)
class InvoiceResult:
    success: bool
    message: str
    subject: str = ""
    body: str = ""
