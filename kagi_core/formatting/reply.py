"""Assistant 回复格式转换。

Kagi 返回的 reply 是其前端渲染用的 HTML 片段，这里按有序规则把它转成：
- html: 原样返回；
- markdown: 结构标签先改写为 Markdown，再统一剥离剩余标签并解码实体；
- plain: 只保留换行与列表前缀的纯文本。

规则顺序有意义：结构标签必须在通用去标签之前改写，否则语义丢失。
"""

import re
from typing import Callable, List, Tuple, Union

Replacement = Union[str, Callable[["re.Match[str]"], str]]

VERBATIM_FORMATS = ("html", "verbatim")

# 非贪婪、不跨行，与 Kagi 渲染输出的单行标签结构一致
_MARKDOWN_RULES: List[Tuple["re.Pattern[str]", Replacement]] = [
    # 标题
    (re.compile(r"<h([1-6])>(.*?)</h[1-6]>"), lambda m: "#" * int(m.group(1)) + " " + m.group(2) + "\n\n"),
    # 粗体 / 斜体
    (re.compile(r"<strong>(.*?)</strong>"), r"**\1**"),
    (re.compile(r"<em>(.*?)</em>"), r"*\1*"),
    # 代码块（codehilite 包裹，允许跨行）
    (
        re.compile(r'<div class="codehilite">.*?<pre><span></span><code>(.*?)</code></pre></div>', re.S),
        "```\n\\1\n```\n",
    ),
    # 行内代码
    (re.compile(r"<code>(.*?)</code>"), r"`\1`"),
    # 列表
    (re.compile(r"<ol>"), ""),
    (re.compile(r"</ol>"), "\n"),
    (re.compile(r"<ul>"), ""),
    (re.compile(r"</ul>"), "\n"),
    (re.compile(r"<li>(.*?)</li>"), r"- \1\n"),
    # 段落
    (re.compile(r"<p></p>"), ""),
    (re.compile(r"<p>(.*?)</p>"), r"\1\n\n"),
    # 换行
    (re.compile(r"<br\s*/?>"), "\n"),
    # 其余标签
    (re.compile(r"<[^>]+>"), ""),
]

# &amp; 必须最后解码，避免 "&amp;lt;" 被二次解码
_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#x27;", "'"),
    ("&amp;", "&"),
)

_PLAIN_RULES: List[Tuple["re.Pattern[str]", Replacement]] = [
    (re.compile(r"</?(p|h[1-6]|div)>"), "\n"),
    (re.compile(r"<br\s*/?>"), "\n"),
    (re.compile(r"<li>(.*?)</li>"), r"- \1\n"),
    (re.compile(r"<[^>]+>"), ""),
]

_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_SPACES_AROUND_NEWLINE = re.compile(r" ?\n ?")


def _apply(rules: List[Tuple["re.Pattern[str]", Replacement]], text: str) -> str:
    for pattern, repl in rules:
        text = pattern.sub(repl, text)
    return text


def html_to_markdown(html: str) -> str:
    text = _apply(_MARKDOWN_RULES, html)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def html_to_plain(html: str) -> str:
    text = _apply(_PLAIN_RULES, html)
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _SPACES_AROUND_NEWLINE.sub("\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def format_reply(html: str, output_format: str = "markdown") -> str:
    """按 output_format 转换回复；未知格式按 markdown 处理。"""

    if output_format in VERBATIM_FORMATS:
        return html
    if output_format == "plain":
        return html_to_plain(html)
    return html_to_markdown(html)
