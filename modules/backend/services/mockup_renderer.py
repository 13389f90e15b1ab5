"""
Mockup Renderer.

Turns a stored mockup's raw HTML into a complete, isolated document.

The HTML is not sanitized; it is rendered as-is, script included. What the
renderer adds is containment: every form is neutralized by an injected
script, and the response headers forbid form submission targets, framing
from other origins, caching, and cross-origin referrers.
"""

import html
from dataclasses import dataclass, field

from modules.backend.core.exceptions import NotFoundError
from modules.backend.models.proposal import Proposal

MOCKUP_NOTICE = "This is a mockup - form submissions are disabled for demonstration purposes."

# Inline and eval script stay allowed because mockups may carry their own.
CONTENT_SECURITY_POLICY = (
    "default-src 'self' 'unsafe-inline' 'unsafe-eval'; "
    "frame-ancestors 'self'; "
    "form-action 'none';"
)

MOCKUP_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "X-Frame-Options": "SAMEORIGIN",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Cross-Origin-Embedder-Policy": "unsafe-none",
    "Cross-Origin-Opener-Policy": "unsafe-none",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

FORM_GUARD_SCRIPT = """
    function disableMockupForms() {
      var notice = %(notice)s;

      function block(e) {
        e.preventDefault();
        e.stopPropagation();
        alert(notice);
        return false;
      }

      document.querySelectorAll('form').forEach(function(form) {
        form.removeAttribute('action');
        form.removeAttribute('method');
        form.addEventListener('submit', block);
        form.onsubmit = block;
      });

      document.querySelectorAll('button[type="submit"], input[type="submit"]').forEach(function(button) {
        button.addEventListener('click', block);
      });
    }

    disableMockupForms();
    document.addEventListener('DOMContentLoaded', disableMockupForms);
    setTimeout(disableMockupForms, 100);
"""

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>%(title)s</title>
  <script>%(script)s  </script>
</head>
<body>
  %(body)s
</body>
</html>"""


@dataclass(frozen=True)
class RenderedMockup:
    """A finished mockup response: body, headers and media type."""

    body: str
    headers: dict[str, str] = field(default_factory=lambda: dict(MOCKUP_HEADERS))
    media_type: str = "text/html"


def _js_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class MockupRenderer:
    """Wraps one of a proposal's mockups into an isolated HTML document."""

    def render(self, proposal: Proposal, mockup_index: int) -> RenderedMockup:
        """
        Render a mockup of an already-authorized proposal.

        Args:
            proposal: Proposal with mockups decoded (legacy rows included)
            mockup_index: Zero-based position in the mockup array

        Returns:
            The complete document and the headers to send with it

        Raises:
            NotFoundError: If mockup_index is outside [0, len(mockups))
        """
        if mockup_index < 0 or mockup_index >= len(proposal.mockups):
            raise NotFoundError("Mockup not found")

        mockup = proposal.mockups[mockup_index]
        document = DOCUMENT_TEMPLATE % {
            "title": html.escape(f"{mockup.title} - {proposal.title}"),
            "script": FORM_GUARD_SCRIPT % {"notice": _js_string(MOCKUP_NOTICE)},
            "body": mockup.html,
        }
        return RenderedMockup(body=document)
