"""
Dignity Index Evaluator page renderer.

Single-file HTML with inline CSS, rendered from ``AnalyzerPage`` state.

Usage:
    from dignity_index.services.page_html import render_page

    html = render_page(page)
"""

from __future__ import annotations

import json
from html import escape as html_escape

from dignity_index.services.ai.dignity.presentation import (
    BADGE_CLASSES,
    SCORE_COLOR_CLASSES,
    present,
)
from dignity_index.services.page_controller import AnalyzerPage

# ── Theme tokens ──────────────────────────────────────────────
COLOR_PRIMARY = "#2563eb"
COLOR_PRIMARY_DARK = "#1d4ed8"
COLOR_BG = "#f8fafc"
COLOR_WHITE = "#ffffff"
COLOR_BORDER = "#e5e7eb"
COLOR_TEXT = "#111827"
COLOR_MUTED = "#6b7280"

FONT_STACK = "'Inter', 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif"

PAGE_TITLE = "Dignity Index Evaluator"
FORM_FIELD = "text"

_STYLES = f"""\
body{{margin:0;background:{COLOR_BG};color:{COLOR_TEXT};font-family:{FONT_STACK};}}
main{{max-width:1024px;margin:0 auto;padding:32px 16px;}}
h1{{font-size:2.25rem;text-align:center;margin:0 0 8px 0;}}
.lead{{text-align:center;color:{COLOR_MUTED};font-size:1.15rem;margin:0 0 32px 0;}}
.grid{{display:grid;grid-template-columns:repeat(auto-fit,minmax(320px,1fr));gap:24px;}}
.card{{background:{COLOR_WHITE};border:1px solid {COLOR_BORDER};border-radius:8px;margin-bottom:24px;}}
.card-header{{padding:16px;border-bottom:1px solid {COLOR_BORDER};}}
.card-content{{padding:16px;}}
.card-footer{{padding:16px;border-top:1px solid {COLOR_BORDER};text-align:right;}}
.card-title{{font-size:1.1rem;font-weight:600;margin:0;}}
.card-description{{font-size:0.9rem;color:{COLOR_MUTED};margin:4px 0 0 0;}}
.row{{display:flex;justify-content:space-between;align-items:center;}}
textarea{{width:100%;min-height:8rem;box-sizing:border-box;border:1px solid #d1d5db;border-radius:6px;padding:8px;font:inherit;}}
button{{background:{COLOR_PRIMARY};color:#fff;border:0;border-radius:6px;padding:8px 16px;font:inherit;cursor:pointer;}}
button:hover{{background:{COLOR_PRIMARY_DARK};}}
button[disabled]{{opacity:0.5;cursor:default;}}
.alert{{background:#fee2e2;color:#991b1b;border-radius:6px;padding:12px 16px;margin-bottom:24px;}}
.badge{{padding:4px 8px;font-size:0.75rem;font-weight:500;border-radius:9999px;}}
.badge-default{{background:#f3f4f6;color:#1f2937;}}
.badge-destructive{{background:#fee2e2;color:#991b1b;}}
.badge-success{{background:#dcfce7;color:#166534;}}
.badge-warning{{background:#fef9c3;color:#854d0e;}}
.badge-secondary{{background:#f3e8ff;color:#6b21a8;}}
.progress{{width:100%;background:#e5e7eb;border-radius:9999px;height:12px;margin:8px 0;}}
.progress-bar{{background:{COLOR_PRIMARY};height:100%;border-radius:9999px;}}
.score{{font-size:1.5rem;font-weight:700;}}
.text-red{{color:#ef4444;}}
.text-orange{{color:#f97316;}}
.text-blue{{color:#3b82f6;}}
.text-green{{color:#22c55e;}}
.muted{{color:{COLOR_MUTED};}}
"""

# Disables the trigger while a submission is in flight.
_SUBMIT_SCRIPT = """\
document.getElementById('analyze-form').addEventListener('submit', function (e) {
  var btn = document.getElementById('analyze-button');
  if (btn.disabled) { e.preventDefault(); return; }
  btn.disabled = true;
  btn.textContent = 'Analyzing...';
});"""


def _js_string(value: str) -> str:
    return json.dumps(value).replace("</", "<\\/")


def render_notification(message: str | None) -> str:
    """Visible banner plus a blocking ``alert()`` for *message*."""
    if not message:
        return ""
    return (
        f'<div class="alert" role="alert">{html_escape(message)}</div>\n'
        f"<script>window.alert({_js_string(message)});</script>"
    )


def render_input_card(page: AnalyzerPage) -> str:
    disabled = " disabled" if page.is_analyzing else ""
    label = "Analyzing..." if page.is_analyzing else "Analyze Text"
    return f"""\
<div class="card">
  <div class="card-header">
    <h3 class="card-title">Input Your Text</h3>
    <p class="card-description">Paste in social media posts, writings, or any text you'd like to evaluate</p>
  </div>
  <form id="analyze-form" method="post" action="/">
    <div class="card-content">
      <textarea name="{FORM_FIELD}" placeholder="Enter text to analyze...">{html_escape(page.input_text)}</textarea>
    </div>
    <div class="card-footer">
      <button id="analyze-button" type="submit"{disabled}>{label}</button>
    </div>
  </form>
</div>"""


def render_result_card(page: AnalyzerPage) -> str:
    result = page.result
    if result is None:
        return ""
    view = present(result.score, result.category)
    badge_class = BADGE_CLASSES[str(view["badge_variant"])]
    color_class = SCORE_COLOR_CLASSES[str(view["score_color"])]
    return f"""\
<div class="card" id="result">
  <div class="card-header">
    <div class="row">
      <h3 class="card-title">Analysis Results</h3>
      <span class="badge {badge_class}">{view["category_label"]}</span>
    </div>
    <p class="card-description">{html_escape(str(view["description"]))}</p>
  </div>
  <div class="card-content">
    <div class="row"><span>Contempt</span><span>Dignity</span></div>
    <div class="progress"><div class="progress-bar" style="width:{view["score_percent"]}%"></div></div>
    <div class="row">
      <span>Score:</span>
      <span class="score {color_class}">{view["score_display"]}</span>
    </div>
    <h3>Explanation:</h3>
    <p class="muted">{html_escape(result.explanation)}</p>
  </div>
</div>"""


def render_about_card() -> str:
    return """\
<div class="card">
  <div class="card-header">
    <h3 class="card-title">About The Dignity Index</h3>
    <p class="card-description">Preventing violence, easing divisions, solving problems</p>
  </div>
  <div class="card-content">
    <p>The Dignity Index scores distinct phrases along an eight-point scale from contempt to dignity.
    Lower scores (1-4) reflect divisive language while higher scores (5-8) reflect language grounded in dignity.</p>
    <p>By focusing on the speech and not the speaker, the Dignity Index is designed to draw our attention
    away from the biases of partisan politics and toward the power we each have to heal our country and each other.</p>
  </div>
</div>"""


def render_page(page: AnalyzerPage) -> str:
    """Render the full evaluator page for *page*'s current state."""
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{PAGE_TITLE}</title>
  <style>
{_STYLES}  </style>
</head>
<body>
<main>
  <h1>{PAGE_TITLE}</h1>
  <p class="lead">Analyze your text along the 8-point Dignity Index scale from contempt to dignity</p>
  {render_notification(page.notification)}
  <div class="grid">
    <div>
{render_input_card(page)}
{render_result_card(page)}
    </div>
    <div>
{render_about_card()}
    </div>
  </div>
</main>
<script>
{_SUBMIT_SCRIPT}
</script>
</body>
</html>
"""
