"""Report generation with Jinja2 templates.

Renders analysis results as markdown risk reports with findings grouped
by severity and per-type remediation guidance, and exports them to HTML.

Provides:
- ReportGenerator: Main report generation class
- export_html: HTML export from markdown
"""

from .generator import ReportGenerator
from .export import export_html

__all__ = ["ReportGenerator", "export_html"]
