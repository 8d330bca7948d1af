"""HTML rendering of a summary for email delivery."""

import html

import markdown as md


def render(title: str, body: str, video_url: str | None = None) -> str:
    """Render a Markdown summary as a standalone HTML page."""
    content: str = md.markdown(body, extensions=["extra", "sane_lists"])
    safe_title = html.escape(title or "Video summary")
    link = (
        f'<p class="source"><a href="{html.escape(video_url, quote=True)}">'
        "Watch on YouTube</a></p>\n"
        if video_url
        else ""
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{safe_title}</title>
    <style>
        body {{
            max-width: 720px;
            margin: 0 auto;
            padding: 2rem;
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
            line-height: 1.6;
            color: #222;
        }}
        h1 {{ border-bottom: 2px solid #86c5ff; padding-bottom: 0.5rem; }}
        hr {{ border: 0; border-top: 1px solid #ddd; margin: 1.5rem 0; }}
        .source {{ color: #666; font-size: 0.9rem; }}
        a {{ color: #0066cc; }}
    </style>
</head>
<body>
<h1>{safe_title}</h1>
{link}{content}
</body>
</html>"""
