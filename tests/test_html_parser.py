# File: tests/test_html_parser.py
from llms_txt.parser.html_parser import html_to_markdown, parse_page_html

PAGE = """
<html>
  <head>
    <title>  Getting Started  </title>
    <meta name="description" content="How to install the project">
    <style>body { color: red; }</style>
  </head>
  <body>
    <header>Site header</header>
    <nav><a href="/">Home</a></nav>
    <main>
      <h1>Install</h1>
      <p>Run the <strong>installer</strong>.</p>
      <script>console.log("x")</script>
    </main>
    <footer>Copyright</footer>
  </body>
</html>
"""


def test_title_and_description():
    parsed = parse_page_html(PAGE)
    assert parsed.title == "Getting Started"
    assert parsed.description == "How to install the project"


def test_main_content_without_chrome():
    parsed = parse_page_html(PAGE)
    assert "# Install" in parsed.markdown
    assert "**installer**" in parsed.markdown
    for noise in ("Site header", "Home", "Copyright", "console.log", "color: red"):
        assert noise not in parsed.markdown


def test_article_then_body_fallback():
    article = parse_page_html("<html><body><p>outside</p><article><p>inside</p></article></body></html>")
    assert article.markdown == "inside"

    body = parse_page_html("<html><body><p>only body</p></body></html>")
    assert body.markdown == "only body"


def test_blank_title_and_missing_meta():
    parsed = parse_page_html("<html><head><title>   </title></head><body><p>x</p></body></html>")
    assert parsed.title is None
    assert parsed.description is None


def test_empty_document():
    parsed = parse_page_html("")
    assert parsed.markdown == ""
    assert parsed.content_html == ""


def test_html_to_markdown_uses_atx_headings():
    assert html_to_markdown("<h2>Section</h2>").startswith("## Section")
    assert html_to_markdown("") == ""


def test_html_to_markdown_fences_code_blocks():
    markdown = html_to_markdown("<pre><code>x = 1</code></pre>")
    assert "```\nx = 1\n```" in markdown
