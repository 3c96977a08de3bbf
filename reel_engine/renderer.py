from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name

from .config import CardStyle


def highlight_code(code: str, style: CardStyle) -> str:
    """Syntax-highlight code into self-contained HTML (inline styles, no stylesheet)"""
    lexer = get_lexer_by_name(style.language)
    formatter = HtmlFormatter(style=style.theme, noclasses=True, nowrap=False)
    return highlight(code, lexer, formatter)


def build_snippet_html(code_html: str, style: CardStyle) -> str:
    """Wrap highlighted code in the editor card template"""
    width, height, padding = style.width, style.height, style.padding
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>snippet</title>
  <style>
    :root {{
      --frame-radius: 16px;
      --frame-bg: #0b1120;
      --chrome-bg: linear-gradient(90deg, #0f172a 0%, #111827 100%);
      --chrome-border: rgba(148, 163, 184, 0.16);
      --shadow: 0 30px 60px rgba(2, 6, 23, 0.6);
    }}
    * {{ box-sizing: border-box; }}
    html, body {{ background: transparent; }}
    body {{
      margin: 0;
      width: {width}px;
      height: {height}px;
      display: flex;
      align-items: center;
      justify-content: center;
      flex-direction: column;
      gap: 60px;
      font-family: {style.font};
      padding: {padding}px;
    }}
    .header {{
      text-align: center;
      color: #e2e8f0;
      padding: 30px 60px;
    }}
    .header h1 {{
      font-size: 72px;
      font-weight: 700;
      margin: 0;
      letter-spacing: -0.02em;
      text-shadow:
        -2px -2px 0 #000,
        2px -2px 0 #000,
        -2px 2px 0 #000,
        2px 2px 0 #000,
        0 0 20px rgba(0, 0, 0, 0.5);
    }}
    .frame {{
      margin-top: 50px;
      width: {width - padding * 2}px;
      background: var(--frame-bg);
      border-radius: var(--frame-radius);
      box-shadow: var(--shadow);
      overflow: hidden;
      border: 1px solid rgba(148, 163, 184, 0.18);
    }}
    .chrome {{
      height: 50px;
      display: flex;
      align-items: center;
      padding: 0 20px;
      background: var(--chrome-bg);
      border-bottom: 1px solid var(--chrome-border);
    }}
    .dots {{ display: flex; gap: 10px; }}
    .dot {{ width: 14px; height: 14px; border-radius: 999px; }}
    .dot.red {{ background: #f87171; }}
    .dot.yellow {{ background: #facc15; }}
    .dot.green {{ background: #4ade80; }}
    .code {{
      padding: 40px;
      font-size: {style.font_size}px;
      line-height: 1.6;
      color: #e2e8f0;
    }}
    .code .highlight {{ background: transparent !important; }}
    .code pre {{
      margin: 0;
      white-space: pre;
      font-family: inherit;
      line-height: inherit !important;
    }}
  </style>
</head>
<body>
  <div class="header">
    <h1>{style.title}</h1>
  </div>
  <div class="frame">
    <div class="chrome">
      <div class="dots">
        <span class="dot red"></span>
        <span class="dot yellow"></span>
        <span class="dot green"></span>
      </div>
    </div>
    <div class="code">
      {code_html}
    </div>
  </div>
</body>
</html>"""


async def render_snippet(code: str, output_path: str, browser, style: CardStyle):
    """Rasterize the code card to a transparent PNG.

    The browser belongs to the caller; only the page opened here is closed.
    """
    html = build_snippet_html(highlight_code(code, style), style)

    page = await browser.new_page(
        viewport={"width": style.width, "height": style.height},
        device_scale_factor=style.scale,
    )
    try:
        await page.set_content(html, wait_until="load")
        await page.screenshot(path=output_path, full_page=False, omit_background=True)
    finally:
        await page.close()

    print(f"✅ Rendered: {output_path}")
