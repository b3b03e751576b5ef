"""HTML export from markdown reports.

Converts markdown risk reports to standalone, styled HTML documents.
"""

from html import escape
from pathlib import Path

import markdown

REPORT_STYLE = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
            line-height: 1.6;
            max-width: 960px;
            margin: 0 auto;
            padding: 20px;
            color: #24292e;
            background-color: #fafbfc;
        }
        h1 { border-bottom: 3px solid #6f42c1; padding-bottom: 10px; }
        h2 { border-bottom: 2px solid #d1d5da; padding-bottom: 6px; margin-top: 1.5em; }
        h3 { color: #b31d28; }
        h4 { margin-bottom: 0.3em; }
        table { border-collapse: collapse; width: 100%; margin: 16px 0; background: white; }
        th, td { border: 1px solid #d1d5da; padding: 8px 12px; text-align: left; }
        th { background-color: #6f42c1; color: white; }
        code { background-color: #f3f4f6; border-radius: 3px; padding: 1px 5px; font-size: 0.9em; }
        pre { background-color: #1f2328; color: #e6edf3; border-radius: 5px; padding: 14px; overflow-x: auto; }
        pre code { background-color: transparent; padding: 0; color: inherit; }
"""


def export_html(markdown_content: str, output_path: str, title: str = "Smart Contract Risk Report") -> str:
    """Export markdown report to a styled HTML document.

    Converts markdown to HTML with table, code block and TOC support,
    and wraps it in a document with embedded CSS.

    Args:
        markdown_content: Markdown report string
        output_path: Path to write HTML file
        title: Document title

    Returns:
        Path to written HTML file

    Example:
        >>> report_md = generator.generate(result, contract_name="Token.sol")
        >>> html_path = export_html(report_md, "/tmp/report.html")
    """
    html_body = markdown.markdown(
        markdown_content,
        extensions=["tables", "fenced_code", "toc"],
    )

    html_document = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>{REPORT_STYLE}    </style>
</head>
<body>
{html_body}
</body>
</html>
"""

    Path(output_path).write_text(html_document, encoding="utf-8")
    return output_path
