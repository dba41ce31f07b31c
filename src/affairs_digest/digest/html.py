"""HTML email digest renderer."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

SECTION = "section"
HEADLINE = "headline"
BULLET = "bullet"
PARAGRAPH = "paragraph"

SECTION_RE = re.compile(r"^(\d+)\.\s+(.+)$")
HEADLINE_RE = re.compile(r"^Headline:\s+(.+)$")
BULLET_RE = re.compile(r"^\*\s+(.+)$")

KEYWORDS = (
    "UPSC", "SSC", "Banking", "Railways", "PSC", "IAS", "PCS",
    "Government", "Ministry", "Cabinet", "Parliament", "Supreme Court",
    "RBI", "Budget", "GDP", "Fiscal", "Monetary", "Policy", "Amendment",
    "Act", "Bill", "Treaty", "Agreement", "MoU", "Constitution",
    "Scheme", "Mission", "Programme", "Initiative", "Campaign",
)


@dataclass(frozen=True)
class Block:
    """A single classified line of digest text."""

    kind: str
    text: str


def escape(text: str) -> str:
    """Escape HTML special characters."""
    return html.escape(str(text))


def keyword_pattern(keywords: Iterable[str]) -> re.Pattern:
    """Whole-word, case-insensitive alternation over the keywords."""
    # Longer phrases first so "Supreme Court" wins over a shorter overlap
    ordered = sorted(keywords, key=len, reverse=True)
    alternation = "|".join(re.escape(k) for k in ordered)
    return re.compile(rf"\b({alternation})\b", re.IGNORECASE)


KEYWORD_RE = keyword_pattern(KEYWORDS)


def highlight_keywords(text: str, pattern: re.Pattern = KEYWORD_RE) -> str:
    """Wrap keyword matches in a highlight span, keeping their original case."""
    return pattern.sub(r'<span class="keyword-highlight">\1</span>', text)


def classify_line(line: str) -> Optional[Block]:
    """Classify one line of digest text. Blank lines yield None."""
    stripped = line.strip()
    if not stripped:
        return None

    match = SECTION_RE.match(stripped)
    if match:
        return Block(SECTION, f"{match.group(1)}. {match.group(2).strip()}")

    match = HEADLINE_RE.match(stripped)
    if match:
        return Block(HEADLINE, match.group(1).strip())

    match = BULLET_RE.match(stripped)
    if match:
        return Block(BULLET, match.group(1).strip())

    return Block(PARAGRAPH, stripped)


def parse_blocks(text: str) -> list[Block]:
    """Split digest text into classified blocks."""
    blocks = []
    for line in (text or "").splitlines():
        block = classify_line(line)
        if block is not None:
            blocks.append(block)
    return blocks


def _inline(text: str) -> str:
    return highlight_keywords(escape(text))


def _render_runs(blocks: list[Block]) -> list[str]:
    """Render non-heading blocks, folding adjacent bullets into one list."""
    parts = []
    bullets: list[str] = []

    def flush():
        if bullets:
            parts.append('<ul class="bullet-list">' + "".join(bullets) + "</ul>")
            bullets.clear()

    for block in blocks:
        if block.kind == BULLET:
            bullets.append(f'<li class="bullet-point">{_inline(block.text)}</li>')
            continue
        flush()
        parts.append(f'<p class="article-text">{_inline(block.text)}</p>')

    flush()
    return parts


def render_blocks(blocks: list[Block]) -> str:
    """Render classified blocks to the digest body HTML.

    Each headline opens an article container that holds every following
    block up to the next headline, the next section heading or the end.
    """
    parts = []
    pending: list[Block] = []
    article: Optional[Block] = None

    def close():
        nonlocal article
        body = _render_runs(pending)
        if article is not None:
            heading = f'<h3 class="headline">{_inline(article.text)}</h3>'
            parts.append(
                '<div class="article-container">' + heading + "\n".join(body) + "</div>"
            )
        else:
            parts.extend(body)
        pending.clear()
        article = None

    for block in blocks:
        if block.kind == SECTION:
            close()
            parts.append(f'<h2 class="section-title">{_inline(block.text)}</h2>')
        elif block.kind == HEADLINE:
            close()
            article = block
        else:
            pending.append(block)

    close()
    return "\n".join(parts)


def format_long_date(day: date) -> str:
    """Format a date like "Monday, 19 October 2026"."""
    return f"{day:%A}, {day.day} {day:%B} {day.year}"


def format_short_date(day: date) -> str:
    """Format a date like "19/10/2026"."""
    return f"{day.day}/{day.month}/{day.year}"


def render_html_email(content: str, today: Optional[date] = None) -> str:
    """Render digest text as an HTML email.

    Args:
        content: Raw digest text returned by the model
        today: Date shown in the header banner, defaults to today

    Returns:
        HTML string with an embedded stylesheet
    """
    today = today or date.today()
    body_html = render_blocks(parse_blocks(content))

    html_content = f'''<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Current Affairs Digest - {format_short_date(today)}</title>
  <style>
    body {{
      font-family: 'Segoe UI', Arial, sans-serif;
      max-width: 800px;
      margin: 0 auto;
      padding: 20px;
      line-height: 1.8;
      color: #333;
      font-size: 18px;
      background-color: #f9f9f9;
    }}
    .header {{
      background: linear-gradient(135deg, #1a4a7c 0%, #2980b9 100%);
      color: white;
      padding: 30px 20px;
      text-align: center;
      border-radius: 12px 12px 0 0;
      box-shadow: 0 3px 10px rgba(0,0,0,0.1);
    }}
    .content {{
      padding: 30px;
      border: 1px solid #ddd;
      border-top: none;
      border-radius: 0 0 12px 12px;
      box-shadow: 0 3px 10px rgba(0,0,0,0.1);
      background-color: #fff;
    }}
    .section-title {{
      color: white;
      background-color: #2c3e50;
      padding: 15px 20px;
      border-radius: 8px;
      margin-top: 35px;
      font-size: 26px;
      letter-spacing: 0.5px;
    }}
    .headline {{
      color: #2c3e50;
      border-left: 5px solid #3498db;
      padding-left: 15px;
      margin-top: 30px;
      font-size: 22px;
      line-height: 1.4;
    }}
    .article-text {{
      font-size: 18px;
      line-height: 1.8;
      margin: 20px 0;
      text-align: justify;
      color: #2c3e50;
      padding: 8px 0;
      text-indent: 30px;
      border-bottom: 1px solid #f0f0f0;
    }}
    .article-text:nth-child(odd) {{
      background-color: #f8f9fa;
    }}
    .bullet-list {{
      background-color: #f8f8f8;
      padding: 15px 15px 15px 40px;
      border-radius: 8px;
      margin: 20px 0;
    }}
    .bullet-point {{
      margin: 12px 0;
      line-height: 1.7;
      font-size: 18px;
    }}
    .footer {{
      margin-top: 40px;
      font-size: 16px;
      color: #7f8c8d;
      text-align: center;
      border-top: 1px solid #ddd;
      padding-top: 25px;
    }}
    .exam-tip {{
      background-color: #ebf5fb;
      border-left: 5px solid #3498db;
      padding: 15px 20px;
      margin: 25px 0;
      font-size: 17px;
      line-height: 1.7;
    }}
    .keyword-highlight {{
      background-color: #fffacd;
      padding: 0 2px;
      font-weight: 600;
      border-radius: 3px;
    }}
    .article-container {{
      margin-bottom: 30px;
      padding-bottom: 20px;
      border-bottom: 2px dashed #e0e0e0;
    }}
    @media (max-width: 600px) {{
      body {{ font-size: 16px; padding: 10px; }}
      .section-title {{ font-size: 22px; padding: 12px 15px; }}
      .headline {{ font-size: 20px; }}
      .article-text {{ font-size: 16px; text-indent: 20px; }}
    }}
  </style>
</head>
<body>
  <div class="header">
    <h1 style="color: white; border: none; margin: 0; font-size: 32px;">CURRENT AFFAIRS DIGEST</h1>
    <p style="margin: 10px 0 0 0; font-size: 20px;">For Government Exam Preparation</p>
    <p style="margin: 10px 0 0 0; font-weight: bold; font-size: 18px;">{format_long_date(today)}</p>
  </div>
  <div class="content">
    <div class="exam-tip">
      These articles have been carefully curated for government exam preparation. Focus on understanding the context, key figures, and implications for various exam topics.
    </div>

{body_html}

    <div class="exam-tip">
      <strong>Study Tips:</strong>
      <ul>
        <li>Pay special attention to <span class="keyword-highlight">highlighted keywords</span> that frequently appear in exams</li>
        <li>Make notes connecting these current events with static portions of your syllabus</li>
        <li>For verification, refer to official sources like PIB, government websites, and reputable news outlets</li>
      </ul>
    </div>
  </div>
  <div class="footer">
    <p><strong>Daily Current Affairs Digest</strong> - Specifically curated for government exam preparation</p>
    <p>Stay consistent, stay focused!</p>
  </div>
</body>
</html>'''

    return html_content
