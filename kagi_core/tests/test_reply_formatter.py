from kagi_core.formatting.reply import format_reply, html_to_markdown, html_to_plain


def test_markdown_paragraph_with_bold():
    assert format_reply("<p>Hello <strong>world</strong></p>", "markdown") == "Hello **world**"


def test_markdown_headers_and_emphasis():
    html = "<h2>Title</h2><p>Some <em>text</em></p>"
    assert html_to_markdown(html) == "## Title\n\nSome *text*"


def test_markdown_code_block():
    html = (
        '<div class="codehilite"><pre><span></span><code>x = 1\n'
        "print(x)\n</code></pre></div><p>Use <code>x</code></p>"
    )
    assert html_to_markdown(html) == "```\nx = 1\nprint(x)\n\n```\nUse `x`"


def test_markdown_lists():
    html = "<p>Items:</p><ul><li>a</li><li>b</li></ul><ol><li>one</li></ol>"
    assert html_to_markdown(html) == "Items:\n\n- a\n- b\n\n- one"


def test_markdown_breaks_entities_and_empty_paragraphs():
    html = '<p></p><p>a &lt;b&gt; &amp;lt; &quot;q&quot; it&#x27;s<br/>next</p><span>x</span>'
    assert html_to_markdown(html) == "a <b> &lt; \"q\" it's\nnext\n\nx"


def test_markdown_collapses_blank_lines():
    assert html_to_markdown("<p>a</p>\n\n\n\n<p>b</p>") == "a\n\nb"


def test_plain_list():
    assert format_reply("<ul><li>a</li><li>b</li></ul>", "plain") == "- a\n- b"


def test_plain_paragraphs_and_whitespace():
    html = "<h1>T</h1><p>one   two\tthree</p><div>x</div><br><strong>y</strong>"
    assert html_to_plain(html) == "T\n\none two three\n\nx\n\ny"


def test_html_is_verbatim():
    html = "<p>  keep <b>me</b> </p>\n"
    assert format_reply(html, "html") == html
    assert format_reply(html, "verbatim") == html


def test_unknown_format_falls_back_to_markdown():
    assert format_reply("<p><strong>x</strong></p>", "rtf") == "**x**"
